"""Granule discovery domain layer.

The domain package hosts pure business logic: granule classification, file
enrichment from collection rules and duplicate-policy evaluation. Domain
modules may depend on the Python standard library and pydantic only; they must
never import from `granule_discovery.io` or `granule_discovery.orchestration`.

I/O concerns (provider listing, catalog lookups, token acquisition) are
injected by the discovery service so that the dependency direction always
flows inward.
"""
