"""
Dagster jobs for granule discovery.
"""

from typing import Any

from dagster import job

from .ops import discover_granules_op, write_granules_op


@job
def discover_granules_job() -> Any:
    """
    Discovery pipeline step:
    1. Discover, de-duplicate and enrich granules for one event
    2. Write the granule payload for the next workflow step
    """
    payload = discover_granules_op()
    write_granules_op(payload)
