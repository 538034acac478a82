"""Ports for reading and repairing blob stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from blobmend.domain.model import Blob, BlobAttributes, BlobId


@runtime_checkable
class BlobStoreUsageChecker(Protocol):
    """Decides whether a soft-deleted blob is still referenced and may be undeleted."""

    def is_blob_in_use(self, blob_store: BlobStore, blob_id: BlobId, blob_name: str | None) -> bool: ...


@runtime_checkable
class BlobStore(Protocol):
    """Named content store able to enumerate, fetch and undelete blobs."""

    @property
    def name(self) -> str: ...

    def blob_ids(self) -> Iterator[BlobId]:
        """Lazily enumerate every non-temporary blob id in the store."""
        ...

    def get(self, blob_id: BlobId, *, include_deleted: bool = False) -> Blob | None: ...

    def get_blob_attributes(self, blob_id: BlobId) -> BlobAttributes | None: ...

    def undelete(
        self,
        usage_checker: BlobStoreUsageChecker | None,
        blob_id: BlobId,
        attributes: BlobAttributes,
        dry_run: bool,  # noqa: FBT001
    ) -> bool:
        """Reverse a soft delete; return ``True`` when the blob was (or would be) undeleted.

        Undeleting a blob that is not deleted is a no-op returning ``False``. How
        ``dry_run`` is honoured is up to the implementation.
        """
        ...


@runtime_checkable
class BlobStoreManager(Protocol):
    def get(self, name: str) -> BlobStore | None: ...


__all__ = ["BlobStore", "BlobStoreManager", "BlobStoreUsageChecker"]
