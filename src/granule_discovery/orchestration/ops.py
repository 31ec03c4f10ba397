"""Granule discovery ops.

- DiscoverGranulesOpConfig: Configuration for a discovery run
- discover_granules_op: Run discovery for one workflow event file
- WriteGranulesConfig: Configuration for writing the discovery output
- write_granules_op: Persist the `{"granules": [...]}` payload as JSON
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dagster import Config, OpExecutionContext, op
from pydantic import field_validator

from granule_discovery.domain.granules import DuplicatePolicy
from granule_discovery.exceptions import ConfigurationError
from granule_discovery.io.connectors.discovery import GranuleDiscoveryService

logger = logging.getLogger(__name__)


class DiscoverGranulesOpConfig(Config):
    """Configuration for granule discovery operation."""

    event_path: str
    # Overrides the event's top-level duplicateHandling when set
    duplicate_handling: Optional[str] = None
    use_list: Optional[bool] = None

    @field_validator("duplicate_handling")
    @classmethod
    def validate_duplicate_handling(cls, v: Optional[str]) -> Optional[str]:
        """Validate the override names a known policy."""
        if v is None:
            return v
        valid = [policy.value for policy in DuplicatePolicy]
        if v not in valid:
            raise ValueError(f"Duplicate handling '{v}' not valid. Valid: {valid}")
        return v


def load_event(
    event_path: str,
    duplicate_handling: Optional[str] = None,
    use_list: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Read a workflow event from a YAML/JSON file and apply overrides.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    try:
        with open(event_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"Unable to read event file {event_path}: {exc}",
            value=event_path,
            original_error=exc,
        ) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Event file {event_path} must contain a mapping", value=event_path
        )

    config = raw.get("config", raw)
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Event file {event_path} has a non-mapping config", value=event_path
        )

    config = dict(config)
    if duplicate_handling is not None:
        config["duplicateHandling"] = duplicate_handling
    if use_list is not None:
        config["useList"] = use_list
    return {"config": config}


@op
def discover_granules_op(
    context: OpExecutionContext, config: DiscoverGranulesOpConfig
) -> Dict[str, Any]:
    """
    Discover granules for the configured event file.

    Args:
        context: Dagster execution context
        config: Event path and optional overrides

    Returns:
        `{"granules": [...]}` (JSON-serializable)
    """
    event = load_event(config.event_path, config.duplicate_handling, config.use_list)
    result = GranuleDiscoveryService().discover(event)

    stats = result.stats()
    context.log.info(
        f"Granule discovery completed - found: {stats['granules_found']}, "
        f"emitted: {len(result.granules)}, skipped: {stats['granules_skipped']}, "
        f"policy: {stats['duplicate_policy']}"
    )
    return result.to_dict()


class WriteGranulesConfig(Config):
    """Configuration for writing discovery output."""

    output_path: Optional[str] = None


@op
def write_granules_op(
    context: OpExecutionContext,
    config: WriteGranulesConfig,
    payload: Dict[str, Any],
) -> Optional[str]:
    """
    Write the discovery payload as JSON, or log it when no path is configured.

    Returns:
        Path written, or None
    """
    if not config.output_path:
        context.log.info(f"Discovery payload: {len(payload['granules'])} granules")
        return None

    path = Path(config.output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Wrote discovery output", extra={"path": str(path)})
    context.log.info(f"Wrote {len(payload['granules'])} granules to {path}")
    return str(path)
