"""Per-format strategy contracts used by restore and integrity checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from blobmend.domain.model import Asset, Blob, Repository
    from blobmend.domain.ports.blob_store import BlobStore

type CancelPredicate = Callable[[], bool]
type IntegrityCheckFailedHandler = Callable[[Asset], None]


@runtime_checkable
class RestoreBlobStrategy(Protocol):
    """Rebuilds metadata for the blobs of one repository format."""

    def restore(
        self,
        properties: Mapping[str, str],
        blob: Blob,
        blob_store: BlobStore,
        dry_run: bool,  # noqa: FBT001
    ) -> None: ...

    def after(self, update_assets: bool, repository: Repository) -> None:  # noqa: FBT001
        """Bulk post-processing, called once per repository touched by a run."""
        ...


@runtime_checkable
class IntegrityCheckStrategy(Protocol):
    def check(
        self,
        repository: Repository,
        blob_store: BlobStore,
        is_cancelled: CancelPredicate,
        on_failure: IntegrityCheckFailedHandler,
    ) -> None: ...


__all__ = [
    "CancelPredicate",
    "IntegrityCheckFailedHandler",
    "IntegrityCheckStrategy",
    "RestoreBlobStrategy",
]
