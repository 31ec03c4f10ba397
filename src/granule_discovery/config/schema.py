"""
Schema validation for discover-granules invocation input.

Pydantic models accept the camelCase wire keys of the workflow message
(`granuleIdExtraction`, `dataType`, `useList`, ...) through aliases while
exposing snake_case attributes to Python callers. Regular expressions are
compiled and checked here, at load time, so a bad pattern fails the run before
any remote call instead of once per file.
"""

import logging
import re
from pathlib import Path
from re import Pattern
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
)

from granule_discovery.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def compile_pattern(value: Union[str, Pattern[str]], require_group: bool = False) -> Pattern[str]:
    """Compile a regex, optionally requiring at least one capturing group.

    Raises:
        ConfigurationError: If the pattern does not compile or lacks a group
    """
    if isinstance(value, re.Pattern):
        compiled = value
    else:
        try:
            compiled = re.compile(value)
        except (re.error, TypeError) as exc:
            raise ConfigurationError(
                f"Invalid regular expression {value!r}: {exc}",
                value=value,
                original_error=exc,
            ) from exc

    if require_group and compiled.groups < 1:
        raise ConfigurationError(
            f"Granule id extraction pattern {compiled.pattern!r} must contain "
            "at least one capturing group",
            value=compiled.pattern,
        )
    return compiled


def _validate_pattern(value: Any, require_group: bool) -> Pattern[str]:
    # pydantic only converts ValueError/AssertionError into ValidationError
    try:
        return compile_pattern(value, require_group=require_group)
    except ConfigurationError as exc:
        raise ValueError(exc.message) from exc


class CollectionFileRule(BaseModel):
    """Schema for one per-file rule of a collection (`collection.files[]`)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    regex: Pattern[str] = Field(..., description="Pattern matched against file names")
    bucket: str = Field(..., min_length=1, description="Key into the buckets table")
    url_path: Optional[str] = Field(None, description="Destination path template")
    type: Optional[str] = Field(None, description="File type, e.g. data or metadata")

    @field_validator("regex", mode="before")
    @classmethod
    def compile_regex(cls, value: Any) -> Pattern[str]:
        return _validate_pattern(value, require_group=False)


class CollectionConfig(BaseModel):
    """Schema for the collection section of the invocation input."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    version: str = Field(..., min_length=1)
    data_type: Optional[str] = Field(None, alias="dataType")
    provider_path: Optional[str] = Field(None, description="Remote path to list")
    granule_id_extraction: Pattern[str] = Field(..., alias="granuleIdExtraction")
    files: List[CollectionFileRule] = Field(default_factory=list)
    url_path: Optional[str] = None
    ignore_files_config_for_discovery: Optional[StrictBool] = Field(
        None, alias="ignoreFilesConfigForDiscovery"
    )
    duplicate_handling: Optional[str] = Field(None, alias="duplicateHandling")

    @field_validator("granule_id_extraction", mode="before")
    @classmethod
    def compile_extraction(cls, value: Any) -> Pattern[str]:
        return _validate_pattern(value, require_group=True)


class ProviderConfig(BaseModel):
    """Connection descriptor for the remote provider.

    Only `protocol` and `host` are interpreted by the bundled listing
    adapters; any other keys are kept and handed to custom adapters as-is.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    protocol: str = Field(..., min_length=1)
    host: str = ""
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("protocol")
    @classmethod
    def normalize_protocol(cls, value: str) -> str:
        return value.strip().lower()


class BucketConfig(BaseModel):
    """Entry of the buckets lookup table."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    type: Optional[str] = None


class DiscoverGranulesConfig(BaseModel):
    """Schema for the `config` object of a discover-granules invocation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider: ProviderConfig
    use_list: bool = Field(False, alias="useList")
    collection: CollectionConfig
    buckets: Dict[str, BucketConfig] = Field(default_factory=dict)
    ignore_files_config_for_discovery: Optional[StrictBool] = Field(
        None, alias="ignoreFilesConfigForDiscovery"
    )
    duplicate_handling: Optional[str] = Field(None, alias="duplicateHandling")
    force_duplicate_overwrite: bool = Field(False, alias="forceDuplicateOverwrite")


def load_discovery_config(
    raw: Union[Mapping[str, Any], DiscoverGranulesConfig],
) -> DiscoverGranulesConfig:
    """
    Validate raw invocation input into a DiscoverGranulesConfig.

    Accepts either the full event (`{"config": {...}}`) or the bare config.

    Raises:
        ConfigurationError: If validation fails
    """
    if isinstance(raw, DiscoverGranulesConfig):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Invocation input must be a mapping, got {type(raw).__name__}",
            value=raw,
        )

    data = raw["config"] if isinstance(raw.get("config"), Mapping) else raw
    try:
        return DiscoverGranulesConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Discovery configuration validation failed: {exc}",
            original_error=exc,
        ) from exc


def load_discovery_config_file(path: Union[str, Path]) -> DiscoverGranulesConfig:
    """Load invocation input from a YAML (or JSON) file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Discovery configuration file not found: {config_path}",
            value=str(config_path),
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {exc}",
            value=str(config_path),
            original_error=exc,
        ) from exc

    logger.debug("Loaded discovery configuration from %s", config_path)
    return load_discovery_config(data or {})
