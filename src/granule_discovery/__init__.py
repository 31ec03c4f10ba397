"""
Granule Discovery - remote file listing, granule grouping and duplicate
resolution for ingest workflows.

A collection configuration drives how listed files are grouped into granules,
which destination bucket each file is routed to, and how granules already
present in the downstream catalog are handled.
"""

__version__ = "0.1.0"
