"""
File enrichment from the collection's per-file rules.

Each file of a granule is matched against `collection.files` in declaration
order; the first matching rule supplies the destination bucket, url_path and
type. Files without a matching rule are dropped from the granule. When
`ignoreFilesConfigForDiscovery` is on, files pass through untouched.
"""

import logging
from typing import List, Optional, Sequence

from granule_discovery.config.schema import CollectionFileRule, DiscoverGranulesConfig
from granule_discovery.exceptions import ConfigurationError, DiscoveryStage

from .models import EnrichedFile, FileDescriptor, Granule, GranuleFile

logger = logging.getLogger(__name__)


def returns_all_files(config: DiscoverGranulesConfig) -> bool:
    """
    Decide whether collection file rules are bypassed.

    The top-level `ignoreFilesConfigForDiscovery` wins when it is an explicit
    boolean; otherwise the collection-level flag applies; the default is
    False, meaning rules ARE applied.
    """
    if config.ignore_files_config_for_discovery is not None:
        return config.ignore_files_config_for_discovery
    if config.collection.ignore_files_config_for_discovery is not None:
        return config.collection.ignore_files_config_for_discovery
    return False


def find_file_rule(
    rules: Sequence[CollectionFileRule], file: FileDescriptor
) -> Optional[CollectionFileRule]:
    """Return the earliest declared rule whose regex matches the file name."""
    for rule in rules:
        if rule.regex.search(file.name):
            return rule
    return None


def enrich_file(
    config: DiscoverGranulesConfig, rule: CollectionFileRule, file: FileDescriptor
) -> EnrichedFile:
    """
    Attach bucket, url_path and type from a matching rule.

    Raises:
        ConfigurationError: If the rule's bucket key is not in `config.buckets`
    """
    bucket = config.buckets.get(rule.bucket)
    if bucket is None:
        raise ConfigurationError(
            f"Bucket '{rule.bucket}' referenced by file rule "
            f"{rule.regex.pattern!r} is not defined in buckets",
            value=rule.bucket,
            stage=DiscoveryStage.ENRICHMENT,
        )

    return EnrichedFile(
        file=file,
        bucket=bucket.name,
        url_path=rule.url_path or config.collection.url_path or "",
        type=rule.type or "",
    )


def enrich(
    config: DiscoverGranulesConfig,
    granule_id: str,
    files: Sequence[FileDescriptor],
) -> Granule:
    """
    Build the output granule for one group of files.

    Args:
        config: Validated invocation config
        granule_id: Granule id shared by the files
        files: Files of the group in listing order

    Returns:
        Granule whose files keep the input order minus dropped files
    """
    collection = config.collection

    if returns_all_files(config):
        granule_files: List[GranuleFile] = list(files)
    else:
        granule_files = []
        for file in files:
            rule = find_file_rule(collection.files, file)
            if rule is None:
                logger.debug(
                    "Dropping file without matching collection file rule",
                    extra={"granule_id": granule_id, "file_name": file.name},
                )
                continue
            granule_files.append(enrich_file(config, rule, file))

    return Granule(
        granule_id=granule_id,
        data_type=collection.data_type,
        version=collection.version,
        files=tuple(granule_files),
    )
