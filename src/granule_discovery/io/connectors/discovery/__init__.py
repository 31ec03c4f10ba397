"""
Discovery connectors package.
"""

from .service import (
    GranuleDiscoveryService,
    discover_granules,
    normalize_provider_path,
    resolve_duplicates,
)

__all__ = [
    "GranuleDiscoveryService",
    "discover_granules",
    "normalize_provider_path",
    "resolve_duplicates",
]
