"""
Data models for granule discovery.

FileDescriptor is what a provider listing returns; Granule is what discovery
emits. Both are immutable once produced. DuplicatePolicy is the closed set of
duplicate-handling behaviors, parsed once from raw configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from granule_discovery.exceptions import ConfigurationError

# Descriptor keys that are modelled explicitly; everything else goes to `extra`
_DESCRIPTOR_KEYS = ("name", "path", "size", "time")


class DuplicatePolicy(str, Enum):
    """How granules already present in the catalog are handled."""

    SKIP = "skip"
    ERROR = "error"
    REPLACE = "replace"
    VERSION = "version"

    @classmethod
    def parse(cls, value: Union[str, "DuplicatePolicy", None]) -> "DuplicatePolicy":
        """Parse a raw configuration value, rejecting anything unknown.

        Raises:
            ConfigurationError: If the value is not one of the four policies
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Invalid duplicate handling configuration encountered: {value!r}",
                value=value,
            ) from None

    @property
    def requires_lookup(self) -> bool:
        """Whether the catalog must be queried under this policy."""
        return self in (DuplicatePolicy.SKIP, DuplicatePolicy.ERROR)


@dataclass(frozen=True)
class FileDescriptor:
    """A remote file as reported by a provider listing."""

    name: str
    path: str = ""
    size: Optional[int] = None
    time: Optional[int] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileDescriptor":
        extra = {k: v for k, v in data.items() if k not in _DESCRIPTOR_KEYS}
        return cls(
            name=data["name"],
            path=data.get("path", ""),
            size=data.get("size"),
            time=data.get("time"),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "path": self.path}
        if self.size is not None:
            result["size"] = self.size
        if self.time is not None:
            result["time"] = self.time
        result.update(self.extra)
        return result


@dataclass(frozen=True)
class EnrichedFile:
    """A FileDescriptor routed to its destination by a collection file rule."""

    file: FileDescriptor
    bucket: str
    url_path: str = ""
    type: str = ""

    @property
    def name(self) -> str:
        return self.file.name

    def to_dict(self) -> Dict[str, Any]:
        result = self.file.to_dict()
        result.update(bucket=self.bucket, url_path=self.url_path, type=self.type)
        return result


GranuleFile = Union[FileDescriptor, EnrichedFile]

# Granule id -> files in listing order; key order is first-seen order
GranuleGroup = Dict[str, List[FileDescriptor]]


@dataclass(frozen=True)
class Granule:
    """Output unit consumed by the downstream ingest step."""

    granule_id: str
    data_type: Optional[str]
    version: str
    files: Sequence[GranuleFile] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "granuleId": self.granule_id,
            "dataType": self.data_type,
            "version": self.version,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class DiscoveryResult:
    """Result of a discovery run with run statistics."""

    granules: List[Granule]
    files_listed: int = 0
    files_unmatched: int = 0
    granules_found: int = 0
    granules_skipped: int = 0
    files_dropped: int = 0
    duplicate_policy: Optional[DuplicatePolicy] = None
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire output of the pipeline step; statistics are logged, not emitted."""
        return {"granules": [g.to_dict() for g in self.granules]}

    def stats(self) -> Dict[str, Any]:
        return {
            "files_listed": self.files_listed,
            "files_unmatched": self.files_unmatched,
            "granules_found": self.granules_found,
            "granules_skipped": self.granules_skipped,
            "granules_emitted": len(self.granules),
            "files_dropped": self.files_dropped,
            "duplicate_policy": (
                self.duplicate_policy.value if self.duplicate_policy else None
            ),
            "duration_ms": self.duration_ms,
        }
