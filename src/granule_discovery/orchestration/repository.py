"""
Dagster Definitions module for granule discovery orchestration.

Exports a single `defs` object so the code location can be loaded by
`dagster dev -m granule_discovery.orchestration.repository`.
"""

from dagster import Definitions

from .jobs import discover_granules_job

defs = Definitions(
    jobs=[
        discover_granules_job,
    ],
)
