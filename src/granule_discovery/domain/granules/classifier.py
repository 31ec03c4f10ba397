"""Granule classification: group listed files by extracted granule id.

The granule id is the first capturing group of the collection's
`granuleIdExtraction` pattern, searched (not anchored) in the file name.
Files whose name does not match are left out; they never end up under a
placeholder key.
"""

import logging
from re import Pattern
from typing import Iterable, Optional, Union

from granule_discovery.config.schema import compile_pattern

from .models import FileDescriptor, GranuleGroup

logger = logging.getLogger(__name__)


def granule_id_of_file(
    pattern: Pattern[str], file: FileDescriptor
) -> Optional[str]:
    """Return the granule id extracted from the file name, or None."""
    match = pattern.search(file.name)
    if match is None:
        return None
    return match.group(1)


def classify(
    pattern: Union[str, Pattern[str]], files: Iterable[FileDescriptor]
) -> GranuleGroup:
    """
    Group files by granule id, preserving listing order within each group.

    Args:
        pattern: Regex whose first capturing group is the granule id
        files: Files as returned by the provider listing

    Returns:
        Mapping of granule id to its files; keys in first-seen order

    Raises:
        ConfigurationError: If the pattern is invalid or has no capturing group
    """
    compiled = compile_pattern(pattern, require_group=True)

    groups: GranuleGroup = {}
    unmatched = 0
    for file in files:
        granule_id = granule_id_of_file(compiled, file)
        if granule_id is None:
            unmatched += 1
            continue
        groups.setdefault(granule_id, []).append(file)

    logger.debug(
        "Classified files into granules",
        extra={
            "pattern": compiled.pattern,
            "granule_count": len(groups),
            "unmatched_count": unmatched,
        },
    )
    return groups
