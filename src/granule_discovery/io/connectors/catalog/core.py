"""
Granule catalog HTTP client.

Answers "does this granule already exist?" with `GET <base>/granules/<id>`
authenticated by a bearer token. A 2xx response means the granule exists and
404 means it does not; anything else, including transport errors, raises.
Retries are left to the workflow layer that invokes discovery.
"""

import logging
from typing import Optional
from urllib.parse import quote

import requests

from granule_discovery.config.settings import get_settings
from granule_discovery.exceptions import CatalogTransportError, ConfigurationError

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Synchronous HTTP client for granule catalog lookups.

    The session is shared by the resolver's worker threads; it is only read
    from after construction.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the catalog client.

        Args:
            token: Bearer token for the catalog API
            base_url: Catalog API base URL. If None, uses settings.archive_api_uri
            timeout: Request timeout in seconds. If None, uses settings default
            session: Pre-built requests session (tests, connection reuse)
        """
        if not token:
            raise ConfigurationError("Catalog bearer token is required")
        self.token = token

        # Settings are only consulted for values the caller did not pass
        if base_url is None or timeout is None:
            settings = get_settings()
            base_url = base_url if base_url is not None else settings.archive_api_uri
            timeout = timeout if timeout is not None else settings.catalog_timeout

        if not base_url:
            raise ConfigurationError(
                "Catalog base URL required via constructor parameter or "
                "GD_ARCHIVE_API_URI"
            )
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/json",
                "User-Agent": "granule-discovery",
            }
        )

        logger.info(
            "Catalog client initialized",
            extra={"base_url": self.base_url, "timeout": self.timeout},
        )

    def granule_url(self, granule_id: str) -> str:
        return f"{self.base_url}/granules/{quote(granule_id, safe='')}"

    def granule_exists(self, granule_id: str) -> bool:
        """
        Look up a granule in the catalog.

        Returns:
            True if the catalog returned the granule, False on 404

        Raises:
            CatalogTransportError: For any other status or request failure
        """
        url = self.granule_url(granule_id)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning(
                "Catalog request failed",
                extra={"url": url, "error": str(exc)},
            )
            raise CatalogTransportError(
                f"Catalog lookup failed for {granule_id}: {exc}",
                granule_id=granule_id,
                original_error=exc,
            ) from exc

        if 200 <= response.status_code < 300:
            logger.debug(
                "Granule found in catalog",
                extra={"url": url, "status_code": response.status_code},
            )
            return True

        if response.status_code == 404:
            logger.debug(
                "Granule not found in catalog",
                extra={"url": url, "status_code": response.status_code},
            )
            return False

        logger.error(
            "Unexpected catalog response",
            extra={"url": url, "status_code": response.status_code},
        )
        raise CatalogTransportError(
            f"Catalog lookup for {granule_id} returned status "
            f"{response.status_code}",
            granule_id=granule_id,
            status_code=response.status_code,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
