"""Configuration management for Granule Discovery.

Deployment settings come from environment variables (Pydantic BaseSettings);
per-invocation input is validated by the schema models.

Usage:
    >>> from granule_discovery.config import get_settings, load_discovery_config
    >>> settings = get_settings()
    >>> config = load_discovery_config(event)
"""

from granule_discovery.config.schema import (
    BucketConfig,
    CollectionConfig,
    CollectionFileRule,
    DiscoverGranulesConfig,
    ProviderConfig,
    compile_pattern,
    load_discovery_config,
    load_discovery_config_file,
)
from granule_discovery.config.settings import Settings, get_settings

__all__ = [
    "BucketConfig",
    "CollectionConfig",
    "CollectionFileRule",
    "DiscoverGranulesConfig",
    "ProviderConfig",
    "Settings",
    "compile_pattern",
    "get_settings",
    "load_discovery_config",
    "load_discovery_config_file",
]
