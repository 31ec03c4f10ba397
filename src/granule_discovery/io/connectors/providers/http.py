"""HTTP(S) directory-index provider client.

Fetches `<protocol>://<host>[:port]/<path>/` and reads the `href` targets of
the returned index page. Sub-directories, query links and parent links are
ignored; listing is not recursive.
"""

import re
from typing import List, Optional
from urllib.parse import unquote, urljoin, urlparse

import requests

from granule_discovery.config.schema import ProviderConfig
from granule_discovery.domain.granules.models import FileDescriptor
from granule_discovery.exceptions import ProviderListingError
from granule_discovery.utils.logging import get_logger

logger = get_logger(__name__)

HREF_PATTERN = re.compile(r"""href\s*=\s*["']([^"'#]+)["']""", re.IGNORECASE)


class HttpProviderClient:
    """List files linked from an HTTP directory index page."""

    def __init__(
        self,
        provider: ProviderConfig,
        use_list: bool = False,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        host = provider.host
        if provider.port:
            host = f"{host}:{provider.port}"
        self.base_url = f"{provider.protocol}://{host}"
        self.use_list = use_list
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        if provider.username and provider.password:
            self.session.auth = (provider.username, provider.password)

    def _directory_url(self, path: str) -> str:
        if not path:
            return f"{self.base_url}/"
        return f"{self.base_url}/{path}/"

    def list(self, path: str) -> List[FileDescriptor]:
        url = self._directory_url(path)
        logger.debug("provider.listing", protocol="http", url=url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderListingError(
                f"Failed to list {url}: {exc}", path=path, original_error=exc
            ) from exc

        if response.status_code != 200:
            raise ProviderListingError(
                f"Failed to list {url}: HTTP {response.status_code}", path=path
            )

        files: List[FileDescriptor] = []
        seen = set()
        directory_path = urlparse(url).path
        for href in HREF_PATTERN.findall(response.text):
            if href.startswith(("?", "..", "mailto:")) or href.endswith("/"):
                continue
            target = urlparse(urljoin(url, href))
            # only entries that live directly in the listed directory
            if target.path.rsplit("/", 1)[0] + "/" != directory_path:
                continue
            name = unquote(target.path.rsplit("/", 1)[-1])
            if not name or name in seen:
                continue
            seen.add(name)
            files.append(FileDescriptor(name=name, path=path))

        return files

    def close(self) -> None:
        """Close the session if this client opened it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HttpProviderClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
