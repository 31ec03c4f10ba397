"""
Granule catalog connector package.
"""

from typing import Optional

from granule_discovery.config.settings import Settings, get_settings
from granule_discovery.io.auth import (
    build_token_config,
    default_secret_resolver,
    get_auth_token,
)

from .core import CatalogClient


def open_catalog_client(settings: Optional[Settings] = None) -> CatalogClient:
    """
    Build an authenticated catalog client from settings.

    Resolves the credential secrets and fetches the bearer token once; the
    returned client reuses that token for every lookup.
    """
    settings = settings or get_settings()
    token_config = build_token_config(settings, default_secret_resolver(settings))
    token = get_auth_token(
        settings.oauth_provider, token_config, timeout=settings.auth_timeout
    )
    return CatalogClient(
        token,
        base_url=settings.archive_api_uri,
        timeout=settings.catalog_timeout,
    )


__all__ = ["CatalogClient", "open_catalog_client"]
