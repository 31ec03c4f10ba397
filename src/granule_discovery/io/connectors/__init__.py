"""Connectors for provider listing, catalog lookups and granule discovery.

Keep this package import lightweight: submodules are imported directly by the
discovery service and tests.
"""
