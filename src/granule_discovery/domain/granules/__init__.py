"""
Granule domain: classification, enrichment and duplicate resolution.
"""

from .classifier import classify, granule_id_of_file
from .duplicates import DuplicateResolver, GranuleLookup, duplicate_handling_type
from .enricher import enrich, enrich_file, find_file_rule, returns_all_files
from .models import (
    DiscoveryResult,
    DuplicatePolicy,
    EnrichedFile,
    FileDescriptor,
    Granule,
    GranuleGroup,
)

__all__ = [
    "DiscoveryResult",
    "DuplicatePolicy",
    "DuplicateResolver",
    "EnrichedFile",
    "FileDescriptor",
    "Granule",
    "GranuleGroup",
    "GranuleLookup",
    "classify",
    "duplicate_handling_type",
    "enrich",
    "enrich_file",
    "find_file_rule",
    "granule_id_of_file",
    "returns_all_files",
]
