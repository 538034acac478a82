"""Blob identifiers, blobs and their stored attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime
    from typing import BinaryIO

TEMPORARY_BLOB_ID_PREFIX: Final[str] = "tmp$"

# Headers are stored in the blob properties with this prefix.
HEADER_PREFIX: Final[str] = "@"
BLOB_NAME_HEADER: Final[str] = "BlobStore.blob-name"
REPO_NAME_HEADER: Final[str] = "Bucket.repo-name"
CONTENT_TYPE_HEADER: Final[str] = "BlobStore.content-type"

BLOB_NAME_PROPERTY: Final[str] = HEADER_PREFIX + BLOB_NAME_HEADER
REPO_NAME_PROPERTY: Final[str] = HEADER_PREFIX + REPO_NAME_HEADER
CONTENT_TYPE_PROPERTY: Final[str] = HEADER_PREFIX + CONTENT_TYPE_HEADER

SHA1_PROPERTY: Final[str] = "sha1"
SIZE_PROPERTY: Final[str] = "size"
CREATION_TIME_PROPERTY: Final[str] = "creationTime"
DELETED_PROPERTY: Final[str] = "deleted"
DELETED_REASON_PROPERTY: Final[str] = "deletedReason"


@dataclass(frozen=True, slots=True)
class BlobId:
    """Opaque identifier of a blob inside one blob store."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Blob id must not be empty")
        if "/" in self.value or "\\" in self.value:
            raise ValueError(f"Blob id must not contain a path separator: {self.value!r}")

    @property
    def is_temporary(self) -> bool:
        return self.value.startswith(TEMPORARY_BLOB_ID_PREFIX)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BlobMetrics:
    sha1: str
    size: int
    creation_time: datetime


@dataclass(frozen=True, slots=True)
class Blob:
    """Immutable content unit; the payload is read lazily through ``open``."""

    id: BlobId
    headers: Mapping[str, str]
    metrics: BlobMetrics
    opener: Callable[[], BinaryIO] = field(repr=False, compare=False)

    def open(self) -> BinaryIO:
        return self.opener()

    def read(self) -> bytes:
        with self.open() as stream:
            return stream.read()


@dataclass(frozen=True, slots=True)
class BlobAttributes:
    """Stored metadata about a blob, including its soft-delete marker.

    ``properties`` is the flat property bag as persisted by the blob store: headers
    under their ``@``-prefixed names plus the metric and deletion entries.
    """

    deleted: bool
    properties: Mapping[str, str] | None
    metrics: BlobMetrics | None = None
    deleted_reason: str | None = None
