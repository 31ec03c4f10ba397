"""Exception hierarchy for granule discovery failures.

Every error raised by the pipeline carries the stage it failed in so callers
and structured logs can tell a configuration problem from a transport fault.
Soft skips (unmatched files, skipped duplicates) are never raised.
"""

from enum import Enum
from typing import Any, Dict, Optional


class DiscoveryStage(str, Enum):
    """Enum for discovery pipeline stages."""

    CONFIG_VALIDATION = "config_validation"
    LISTING = "listing"
    CLASSIFICATION = "classification"
    AUTHENTICATION = "authentication"
    DUPLICATE_RESOLUTION = "duplicate_resolution"
    ENRICHMENT = "enrichment"


class GranuleDiscoveryError(Exception):
    """Base error for granule discovery with stage context."""

    default_stage = DiscoveryStage.CONFIG_VALIDATION

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[DiscoveryStage] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.stage = stage or self.default_stage
        self.original_error = original_error
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to structured dict for logging."""
        payload: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "failed_stage": self.stage.value,
            "message": self.message,
        }
        if self.original_error is not None:
            payload["original_error_type"] = type(self.original_error).__name__
            payload["original_error_message"] = str(self.original_error)
        return payload


class ConfigurationError(GranuleDiscoveryError):
    """Invalid configuration: bad policy value, missing bucket, bad pattern."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        *,
        stage: Optional[DiscoveryStage] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.value = value
        super().__init__(message, stage=stage, original_error=original_error)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.value is not None:
            payload["value"] = repr(self.value)
        return payload


class SecretNotFoundError(ConfigurationError):
    """Raised when no secret source produced a value for a secret name."""

    default_stage = DiscoveryStage.AUTHENTICATION


class TransportError(GranuleDiscoveryError):
    """Listing, catalog or token endpoint failure other than a clean not-found."""

    default_stage = DiscoveryStage.LISTING


class ProviderListingError(TransportError):
    """Raised when the provider listing call fails."""

    def __init__(
        self,
        message: str,
        path: str = "",
        *,
        original_error: Optional[BaseException] = None,
    ):
        self.path = path
        super().__init__(
            message, stage=DiscoveryStage.LISTING, original_error=original_error
        )


class CatalogTransportError(TransportError):
    """Raised when a catalog lookup fails with anything but 404."""

    default_stage = DiscoveryStage.DUPLICATE_RESOLUTION

    def __init__(
        self,
        message: str,
        granule_id: str,
        status_code: Optional[int] = None,
        *,
        original_error: Optional[BaseException] = None,
    ):
        self.granule_id = granule_id
        self.status_code = status_code
        super().__init__(message, original_error=original_error)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["granule_id"] = self.granule_id
        payload["status_code"] = self.status_code
        return payload


class AuthenticationError(TransportError):
    """Raised when the bearer token could not be obtained."""

    default_stage = DiscoveryStage.AUTHENTICATION


class DuplicateConflictError(GranuleDiscoveryError):
    """Raised under the `error` policy when a granule already exists."""

    default_stage = DiscoveryStage.DUPLICATE_RESOLUTION

    def __init__(self, granule_id: str):
        self.granule_id = granule_id
        super().__init__(
            f"Duplicate granule found for {granule_id} with duplicate "
            "configuration set to error"
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["granule_id"] = self.granule_id
        return payload


__all__ = [
    "AuthenticationError",
    "CatalogTransportError",
    "ConfigurationError",
    "DiscoveryStage",
    "DuplicateConflictError",
    "GranuleDiscoveryError",
    "ProviderListingError",
    "SecretNotFoundError",
    "TransportError",
]
