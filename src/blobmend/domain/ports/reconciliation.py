"""Port for the per-blob-store log of created blobs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date

    from blobmend.domain.model import BlobId
    from blobmend.domain.ports.blob_store import BlobStore


@runtime_checkable
class ReconciliationLog(Protocol):
    def log_blob_created(self, blob_store: BlobStore, blob_id: BlobId) -> None: ...

    def blobs_created_since(self, blob_store: BlobStore, since: date) -> Iterator[BlobId]: ...


__all__ = ["ReconciliationLog"]
