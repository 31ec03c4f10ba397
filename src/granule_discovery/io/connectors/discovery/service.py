"""
GranuleDiscoveryService: list, classify, de-duplicate and enrich granules.
"""

import re
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from granule_discovery.config.schema import (
    DiscoverGranulesConfig,
    ProviderConfig,
    load_discovery_config,
)
from granule_discovery.config.settings import Settings, get_settings
from granule_discovery.domain.granules import (
    DiscoveryResult,
    DuplicatePolicy,
    DuplicateResolver,
    FileDescriptor,
    GranuleGroup,
    GranuleLookup,
    classify,
    duplicate_handling_type,
    enrich,
)
from granule_discovery.exceptions import GranuleDiscoveryError
from granule_discovery.io.connectors.catalog import open_catalog_client
from granule_discovery.io.connectors.providers import (
    ProviderClient,
    build_provider_client,
)
from granule_discovery.utils.logging import get_logger, run_context

ProviderFactory = Callable[[ProviderConfig, bool], ProviderClient]
CatalogFactory = Callable[[], GranuleLookup]


def normalize_provider_path(path: Optional[str]) -> str:
    """
    Normalize a collection's provider_path for listing.

    Empty/None becomes "", repeated slashes collapse, and leading/trailing
    slashes are removed: "/data//l1/" -> "data/l1".
    """
    if not path:
        return ""
    return re.sub(r"/{2,}", "/", path).strip("/")


class GranuleDiscoveryService:
    """
    Discovery pipeline step orchestrating:
    - Provider listing
    - Granule classification
    - Duplicate resolution against the catalog
    - File enrichment from collection rules
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider_factory: Optional[ProviderFactory] = None,
        catalog_factory: Optional[CatalogFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.provider_factory = provider_factory or self._default_provider_factory
        self.catalog_factory = catalog_factory or self._default_catalog_factory
        self.logger = get_logger(__name__)

    def _default_provider_factory(
        self, provider: ProviderConfig, use_list: bool
    ) -> ProviderClient:
        return build_provider_client(
            provider, use_list=use_list, timeout=self.settings.provider_timeout
        )

    def _default_catalog_factory(self) -> GranuleLookup:
        return open_catalog_client(self.settings)

    def discover(
        self, config: Union[DiscoverGranulesConfig, Mapping[str, Any]]
    ) -> DiscoveryResult:
        """
        Run discovery for one invocation.

        Args:
            config: Validated config, or raw invocation input

        Returns:
            DiscoveryResult with granules in first-seen order

        Raises:
            GranuleDiscoveryError: Configuration, transport or duplicate
                conflict failures; no partial result is produced
        """
        start_time = time.time()
        try:
            config = load_discovery_config(config)
        except GranuleDiscoveryError as exc:
            self.logger.error("discovery.failed", **exc.to_dict())
            raise

        collection = config.collection
        with run_context(
            collection=collection.name or collection.data_type,
            version=collection.version,
            provider=config.provider.id or config.provider.host,
        ):
            return self._run(config, start_time)

    def _run(self, config: DiscoverGranulesConfig, start_time: float) -> DiscoveryResult:
        collection = config.collection

        try:
            # Policy is resolved before any remote call so bad values fail fast
            policy = duplicate_handling_type(config)
            path = normalize_provider_path(collection.provider_path)
            self.logger.info(
                "discovery.started",
                provider_path=path,
                use_list=config.use_list,
                duplicate_handling=policy.value,
            )

            files = self._list_files(config, path)
            self.logger.info("discovery.files_listed", file_count=len(files))

            groups = classify(collection.granule_id_extraction, files)
            files_grouped = sum(len(members) for members in groups.values())
            self.logger.info(
                "classification.completed",
                granule_count=len(groups),
                unmatched_count=len(files) - files_grouped,
            )

            surviving = self._handle_duplicates(groups, policy)
            self.logger.info(
                "duplicates.resolved",
                duplicate_handling=policy.value,
                kept_count=len(surviving),
                skipped_count=len(groups) - len(surviving),
            )

            granules = [enrich(config, gid, groups[gid]) for gid in surviving]
            files_dropped = sum(
                len(groups[g.granule_id]) - len(g.files) for g in granules
            )
            if files_dropped:
                self.logger.info("enrichment.files_dropped", dropped_count=files_dropped)

        except GranuleDiscoveryError as exc:
            self.logger.error("discovery.failed", **exc.to_dict())
            raise

        result = DiscoveryResult(
            granules=granules,
            files_listed=len(files),
            files_unmatched=len(files) - files_grouped,
            granules_found=len(groups),
            granules_skipped=len(groups) - len(surviving),
            files_dropped=files_dropped,
            duplicate_policy=policy,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        self.logger.info("discovery.completed", **result.stats())
        return result

    def _list_files(
        self, config: DiscoverGranulesConfig, path: str
    ) -> List[FileDescriptor]:
        client = self.provider_factory(config.provider, config.use_list)
        try:
            return client.list(path)
        finally:
            _close_if_closable(client)

    def _handle_duplicates(
        self, groups: GranuleGroup, policy: DuplicatePolicy
    ) -> List[str]:
        """Return the granule ids that survive the duplicate policy, in group order."""
        return resolve_duplicates(
            list(groups),
            policy,
            settings=self.settings,
            catalog_factory=self.catalog_factory,
        )


def _close_if_closable(client: Any) -> None:
    close = getattr(client, "close", None)
    if callable(close):
        close()


def resolve_duplicates(
    granule_ids: Iterable[str],
    policy: Union[DuplicatePolicy, str],
    settings: Optional[Settings] = None,
    catalog_factory: Optional[CatalogFactory] = None,
) -> List[str]:
    """
    Filter granule ids against the catalog under a duplicate-handling policy.

    The catalog client (and with it the bearer token) is only built when the
    policy needs lookups and there is at least one id; it is closed afterwards.

    Returns:
        Surviving ids in input order, without repeats
    """
    policy = DuplicatePolicy.parse(policy)
    ids = list(dict.fromkeys(granule_ids))
    if not policy.requires_lookup or not ids:
        return ids

    settings = settings or get_settings()
    if catalog_factory is None:
        catalog = open_catalog_client(settings)
    else:
        catalog = catalog_factory()
    try:
        resolver = DuplicateResolver(catalog, max_workers=settings.catalog_max_workers)
        return resolver.resolve(ids, policy)
    finally:
        _close_if_closable(catalog)


def discover_granules(
    event: Union[DiscoverGranulesConfig, Mapping[str, Any]],
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Discover granules for a workflow event.

    Args:
        event: `{"config": {...}}` event, bare config dict or validated config

    Returns:
        `{"granules": [...]}` ready to hand to the next workflow step
    """
    return GranuleDiscoveryService(settings=settings).discover(event).to_dict()
