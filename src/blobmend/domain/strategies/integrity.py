"""Fallback integrity check: every asset must point at a live blob with matching sha1."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from blobmend.domain.errors import BlobStoreError
from blobmend.domain.model import BlobId

if TYPE_CHECKING:
    from blobmend.domain.model import Asset, Repository
    from blobmend.domain.ports import (
        AssetRepository,
        BlobStore,
        CancelPredicate,
        IntegrityCheckFailedHandler,
    )

log = getLogger(__name__)


class DefaultIntegrityCheckStrategy:
    def __init__(self, assets: AssetRepository) -> None:
        self.assets = assets

    def check(
        self,
        repository: Repository,
        blob_store: BlobStore,
        is_cancelled: CancelPredicate,
        on_failure: IntegrityCheckFailedHandler,
    ) -> None:
        checked = 0
        failed = 0
        for asset in list(self.assets.browse(repository.name)):
            if is_cancelled():
                log.warning("Integrity check of repository %s cancelled", repository.name)
                break
            if asset.blob_store_name != blob_store.name:
                continue

            try:
                problem = _find_problem(asset, blob_store)
            except BlobStoreError as exc:
                problem = str(exc)
            checked += 1
            if problem is not None:
                failed += 1
                log.error("Integrity check failed for asset %s: %s", asset.name, problem)
                on_failure(asset)

        log.info(
            "Integrity check of repository %s: checked: %s, failed: %s",
            repository.name,
            checked,
            failed,
        )


def _find_problem(asset: Asset, blob_store: BlobStore) -> str | None:
    attributes = blob_store.get_blob_attributes(BlobId(asset.blob_id))
    if attributes is None:
        return f"blob {asset.blob_id} is missing"
    if attributes.deleted:
        # undelete may still bring it back
        log.warning("Blob %s of asset %s is deleted", asset.blob_id, asset.name)
        return None
    if asset.sha1 is None or attributes.metrics is None:
        return None
    if attributes.metrics.sha1 != asset.sha1:
        return f"sha1 {attributes.metrics.sha1} does not match expected {asset.sha1}"
    return None
