"""
Provider listing clients.

Bundled clients are registered on import: `file` (local directories) and
`http`/`https` (directory index pages).
"""

from .http import HttpProviderClient
from .local import LocalProviderClient
from .registry import (
    ProviderClient,
    build_provider_client,
    register_provider_client,
    registered_protocols,
)

register_provider_client("file", LocalProviderClient)
register_provider_client("http", HttpProviderClient)
register_provider_client("https", HttpProviderClient)

__all__ = [
    "HttpProviderClient",
    "LocalProviderClient",
    "ProviderClient",
    "build_provider_client",
    "register_provider_client",
    "registered_protocols",
]
