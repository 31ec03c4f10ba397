"""Local filesystem provider client.

Treats `provider.host` as the root directory and lists the regular files
directly under `<root>/<path>`. Useful for staging areas mounted on the
worker and for running discovery end to end without a remote transport.
"""

from pathlib import Path
from typing import List

from granule_discovery.config.schema import ProviderConfig
from granule_discovery.domain.granules.models import FileDescriptor
from granule_discovery.exceptions import ProviderListingError
from granule_discovery.utils.logging import get_logger

logger = get_logger(__name__)


class LocalProviderClient:
    """List files from a directory on the local filesystem."""

    def __init__(self, provider: ProviderConfig, use_list: bool = False, timeout: int = 30):
        self.root = Path(provider.host or "/")
        # listing mode and timeout have no meaning for local directories
        self.use_list = use_list
        self.timeout = timeout

    def list(self, path: str) -> List[FileDescriptor]:
        directory = self.root / path if path else self.root
        logger.debug("provider.listing", protocol="file", directory=str(directory))

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
            files = []
            for entry in entries:
                if not entry.is_file():
                    continue
                stat = entry.stat()
                files.append(
                    FileDescriptor(
                        name=entry.name,
                        path=path,
                        size=stat.st_size,
                        time=int(stat.st_mtime * 1000),
                    )
                )
        except OSError as exc:
            raise ProviderListingError(
                f"Failed to list {directory}: {exc}",
                path=path,
                original_error=exc,
            ) from exc

        return files
