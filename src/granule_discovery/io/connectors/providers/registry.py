"""
Provider client registry.

A provider client lists the files under a path on a remote provider. Clients
are selected by the provider's `protocol`; deployments plug in FTP/S3/etc.
clients with `register_provider_client`.
"""

from typing import Callable, Dict, List, Protocol, runtime_checkable

from granule_discovery.config.schema import ProviderConfig
from granule_discovery.domain.granules.models import FileDescriptor
from granule_discovery.exceptions import ConfigurationError

ProviderClientFactory = Callable[..., "ProviderClient"]


@runtime_checkable
class ProviderClient(Protocol):
    """Lists the files found at a provider path."""

    def list(self, path: str) -> List[FileDescriptor]:
        ...


_PROVIDER_CLIENTS: Dict[str, ProviderClientFactory] = {}


def register_provider_client(protocol: str, factory: ProviderClientFactory) -> None:
    """Register a factory `factory(provider, use_list=..., timeout=...)` for a protocol."""
    _PROVIDER_CLIENTS[protocol.strip().lower()] = factory


def registered_protocols() -> List[str]:
    return sorted(_PROVIDER_CLIENTS)


def build_provider_client(
    provider: ProviderConfig, use_list: bool = False, timeout: int = 30
) -> ProviderClient:
    """
    Build the listing client for a provider.

    Args:
        provider: Provider connection descriptor
        use_list: Ask the client to use its LIST-style listing mode
        timeout: Transport timeout in seconds

    Raises:
        ConfigurationError: If no client is registered for the protocol
    """
    factory = _PROVIDER_CLIENTS.get(provider.protocol)
    if factory is None:
        raise ConfigurationError(
            f"Protocol '{provider.protocol}' is not supported; "
            f"registered protocols: {registered_protocols()}",
            value=provider.protocol,
        )
    return factory(provider, use_list=use_list, timeout=timeout)
