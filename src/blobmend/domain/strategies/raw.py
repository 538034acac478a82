"""Restore strategy for the ``raw`` format: one asset per blob, named by the blob."""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING, Final

from blobmend.domain.model import (
    BLOB_NAME_PROPERTY,
    CONTENT_TYPE_PROPERTY,
    REPO_NAME_PROPERTY,
    Asset,
)
from blobmend.domain.restore.dry_run import dry_run_prefix

if TYPE_CHECKING:
    from collections.abc import Mapping

    from blobmend.domain.model import Blob, Repository
    from blobmend.domain.ports import BlobStore, MetadataUnitOfWork

RAW_FORMAT: Final[str] = "raw"

log = getLogger(__name__)


class RawRestoreBlobStrategy:
    def __init__(self, uow: MetadataUnitOfWork) -> None:
        self.uow = uow
        self._restored: Counter[str] = Counter()

    def restore(
        self,
        properties: Mapping[str, str],
        blob: Blob,
        blob_store: BlobStore,
        dry_run: bool,  # noqa: FBT001
    ) -> None:
        prefix = dry_run_prefix(dry_run)
        repository_name = properties.get(REPO_NAME_PROPERTY)
        asset_name = properties.get(BLOB_NAME_PROPERTY)
        if not repository_name or not asset_name:
            log.warning("%sBlob %s has no repository or blob name, skipping", prefix, blob.id)
            return

        assets = self.uow.repositories.assets
        if assets.find(repository_name, asset_name) is not None:
            log.debug("Asset %s already present in repository %s", asset_name, repository_name)
            return

        log.info(
            "%sRestoring asset %s in repository %s from blob %s",
            prefix,
            asset_name,
            repository_name,
            blob.id,
        )
        if dry_run:
            return

        assets.add(
            Asset(
                repository_name=repository_name,
                name=asset_name,
                blob_store_name=blob_store.name,
                blob_id=blob.id.value,
                sha1=blob.metrics.sha1,
                size=blob.metrics.size,
                content_type=properties.get(CONTENT_TYPE_PROPERTY),
            )
        )
        self.uow.commit()
        self._restored[repository_name] += 1

    def after(self, update_assets: bool, repository: Repository) -> None:  # noqa: FBT001
        restored = self._restored.pop(repository.name, 0)
        if update_assets:
            log.info("Restored %s assets in repository %s", restored, repository.name)
