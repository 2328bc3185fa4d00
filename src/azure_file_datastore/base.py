"""Content contract and abstract datastore interface."""

import io
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import BinaryIO, ContextManager, Iterator, NamedTuple, Optional, Protocol


class ContentLike(Protocol):
    """What the datastore needs from an attachment library's content value."""

    name: Optional[str]
    size: int
    meta: dict

    def open(self) -> ContextManager[BinaryIO]:
        """Yield a binary stream, valid only inside the with-block."""


@dataclass
class Content:
    """Simple in-memory content value satisfying ContentLike."""

    data: bytes
    name: Optional[str] = None
    meta: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_bytes(cls, data: bytes, name: str | None = None, meta: dict | None = None) -> "Content":
        return cls(data=data, name=name, meta=dict(meta or {}))

    @property
    def size(self) -> int:
        return len(self.data)

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        stream = io.BytesIO(self.data)
        try:
            yield stream
        finally:
            stream.close()


class ReadResult(NamedTuple):
    """Body and resolved metadata of a stored object."""

    content: bytes
    metadata: dict[str, str]


class DataStore(ABC):
    """Uniform write/read/destroy/url contract for attachment backends."""

    @abstractmethod
    def write(self, content: ContentLike) -> str:
        """Store content under a newly generated uid and return the uid."""

    @abstractmethod
    def read(self, uid: str) -> ReadResult:
        """Return the stored bytes and metadata. Raises StorageNotFoundError if missing."""

    @abstractmethod
    def update_metadata(self, uid: str) -> bool:
        """Move legacy sidecar metadata inline. Returns True if anything changed."""

    @abstractmethod
    def destroy(self, uid: str) -> bool:
        """Delete the object. Returns False instead of raising on backend errors."""

    @abstractmethod
    def url_for(self, uid: str, scheme: str | None = None, host: str | None = None) -> str:
        """Return the public URL for the given uid."""
