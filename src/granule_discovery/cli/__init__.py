"""Command-line interface for granule discovery."""
