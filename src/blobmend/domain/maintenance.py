"""Metadata-side services the restore task relies on."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blobmend.domain.model import Asset, BlobId, Repository
    from blobmend.domain.ports import AssetRepository, BlobStore, MetadataUnitOfWork

log = getLogger(__name__)


class AssetMaintenanceService:
    """Deletes assets, committing each deletion on its own."""

    def __init__(self, uow: MetadataUnitOfWork) -> None:
        self.uow = uow

    def delete_asset(self, repository: Repository, asset: Asset) -> None:
        if asset.repository_name != repository.name:
            raise ValueError(
                f"Asset {asset.name} belongs to '{asset.repository_name}', not '{repository.name}'"
            )
        log.debug("Deleting asset %s from repository %s", asset.name, repository.name)
        self.uow.repositories.assets.delete(asset)
        self.uow.commit()


class AssetBlobStoreUsageChecker:
    """A blob is in use while at least one asset still points at it."""

    def __init__(self, assets: AssetRepository) -> None:
        self.assets = assets

    def is_blob_in_use(self, blob_store: BlobStore, blob_id: BlobId, blob_name: str | None) -> bool:
        _ = blob_name
        return self.assets.exists_for_blob(blob_store.name, blob_id.value)
