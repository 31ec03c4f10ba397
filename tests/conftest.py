"""Shared pytest fixtures for granule discovery tests."""

import os
from typing import Any, Dict

import pytest

# Keep a developer's .env out of the test run
os.environ.setdefault("GD_ENV_FILE", os.devnull)

from granule_discovery.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Isolate every test from cached settings and ambient GD_ variables."""
    for key in list(os.environ):
        if key.startswith("GD_") and key != "GD_ENV_FILE":
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def catalog_env(monkeypatch):
    """Minimal earthdata settings for building a catalog client."""
    monkeypatch.setenv("GD_ARCHIVE_API_URI", "https://catalog.example.com/api/")
    monkeypatch.setenv("GD_URS_ID", "discovery-bot")
    monkeypatch.setenv("GD_URS_PASSWORD_SECRET_NAME", "urs-password")
    monkeypatch.setenv("GD_SECRET_URS_PASSWORD", "hunter2")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def discovery_event() -> Dict[str, Any]:
    """A discover-granules event for a two-file-per-granule collection."""
    return {
        "config": {
            "provider": {"id": "MODAPS", "protocol": "file", "host": "/data"},
            "useList": False,
            "buckets": {
                "protected": {"name": "archive-protected", "type": "protected"},
                "public": {"name": "archive-public", "type": "public"},
            },
            "collection": {
                "name": "MOD09GQ",
                "version": "006",
                "dataType": "MOD09GQ",
                "provider_path": "/modis//MOD09GQ/",
                "granuleIdExtraction": r"^(MOD09GQ\.A\d+)\..*$",
                "url_path": "{cmrMetadata.Granule.Collection.ShortName}",
                "files": [
                    {
                        "regex": r"^MOD09GQ\.A\d+\.hdf$",
                        "bucket": "protected",
                        "type": "data",
                    },
                    {
                        "regex": r"^MOD09GQ\.A\d+\.hdf\.met$",
                        "bucket": "public",
                        "url_path": "metadata",
                        "type": "metadata",
                    },
                ],
            },
        }
    }
