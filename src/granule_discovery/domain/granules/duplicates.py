"""
Duplicate resolution against the granule catalog.

Policies:

skip:               Granules already in the catalog are filtered out
error:              Any granule already in the catalog fails the whole run
replace, version:   No lookups; duplicates are dealt with by later steps

Lookups for distinct granule ids are independent and run on a bounded thread
pool. Results are consumed in input order, so under `error` the reported
conflict is the first existing granule in input order; remaining lookups are
cancelled and no partial list escapes.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Protocol, Tuple, Union, runtime_checkable

from granule_discovery.config.schema import DiscoverGranulesConfig
from granule_discovery.exceptions import DuplicateConflictError

from .models import DuplicatePolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@runtime_checkable
class GranuleLookup(Protocol):
    """Read-only catalog access used by the resolver."""

    def granule_exists(self, granule_id: str) -> bool:
        """True if the catalog has the granule, False on not-found.

        Any other failure must raise; it must never be reported as False.
        """
        ...


def duplicate_handling_type(config: DiscoverGranulesConfig) -> DuplicatePolicy:
    """
    Resolve the active duplicate-handling policy from the invocation config.

    Precedence:
    1. `forceDuplicateOverwrite: true` forces `replace`
    2. top-level `duplicateHandling`
    3. `collection.duplicateHandling`
    4. `error`

    Raises:
        ConfigurationError: If the selected value is not a known policy
    """
    if config.force_duplicate_overwrite:
        return DuplicatePolicy.REPLACE
    if config.duplicate_handling is not None:
        return DuplicatePolicy.parse(config.duplicate_handling)
    if config.collection.duplicate_handling is not None:
        return DuplicatePolicy.parse(config.collection.duplicate_handling)
    return DuplicatePolicy.ERROR


class DuplicateResolver:
    """Filter granule ids according to a duplicate-handling policy."""

    def __init__(self, lookup: GranuleLookup, max_workers: int = DEFAULT_MAX_WORKERS):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.lookup = lookup
        self.max_workers = max_workers

    def resolve(
        self,
        granule_ids: Iterable[str],
        policy: Union[DuplicatePolicy, str],
    ) -> List[str]:
        """
        Return the granule ids that should proceed.

        Args:
            granule_ids: Candidate ids; duplicates in the input are collapsed
            policy: Duplicate-handling policy

        Returns:
            Surviving ids in input order

        Raises:
            ConfigurationError: If the policy value is unknown
            DuplicateConflictError: Under `error` when a granule already exists
            TransportError: If a lookup fails for any reason but not-found
        """
        policy = DuplicatePolicy.parse(policy)
        ids = list(dict.fromkeys(granule_ids))

        if not policy.requires_lookup or not ids:
            return ids

        kept: List[str] = []
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(ids)),
            thread_name_prefix="catalog-lookup",
        )
        try:
            futures: List[Tuple[str, Future]] = [
                (granule_id, executor.submit(self.lookup.granule_exists, granule_id))
                for granule_id in ids
            ]
            for granule_id, future in futures:
                if not future.result():
                    kept.append(granule_id)
                    continue
                if policy is DuplicatePolicy.ERROR:
                    logger.error(
                        "Duplicate granule found with policy error",
                        extra={"granule_id": granule_id},
                    )
                    raise DuplicateConflictError(granule_id)
                logger.info(
                    "Skipping granule already in catalog",
                    extra={"granule_id": granule_id},
                )
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        return kept
