"""I/O adapters: provider listing, catalog lookups and authentication."""
