"""Blob store keeping each blob as a ``.bytes`` file plus a ``.properties`` document."""

from __future__ import annotations

import hashlib
import os
import uuid
from datetime import UTC, datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from blobmend.adapters.filesystem.schema import BlobPropertiesDocument
from blobmend.domain.errors import BlobStoreError
from blobmend.domain.model import (
    BLOB_NAME_PROPERTY,
    TEMPORARY_BLOB_ID_PREFIX,
    Blob,
    BlobAttributes,
    BlobId,
)
from blobmend.domain.restore.dry_run import dry_run_prefix

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from typing import BinaryIO

    from blobmend.domain.ports import BlobStoreUsageChecker, ReconciliationLog

CONTENT_DIR: Final[str] = "content"
BYTES_SUFFIX: Final[str] = ".bytes"
PROPERTIES_SUFFIX: Final[str] = ".properties"

log = getLogger(__name__)


class FileBlobStore:
    def __init__(
        self,
        name: str,
        root: Path,
        *,
        reconciliation_log: ReconciliationLog | None = None,
    ) -> None:
        self._name = name
        self.root = root
        self.content_dir = root / CONTENT_DIR
        self.content_dir.mkdir(parents=True, exist_ok=True)
        self.reconciliation_log = reconciliation_log

    @property
    def name(self) -> str:
        return self._name

    def create(
        self,
        content: bytes,
        headers: Mapping[str, str],
        *,
        temporary: bool = False,
    ) -> Blob:
        """Store ``content`` as a new blob and record it in the reconciliation log."""

        prefix = TEMPORARY_BLOB_ID_PREFIX if temporary else ""
        blob_id = BlobId(f"{prefix}{uuid.uuid4()}")
        document = BlobPropertiesDocument(
            headers=dict(headers),
            sha1=hashlib.sha1(content).hexdigest(),  # noqa: S324
            size=len(content),
            creation_time=datetime.now(UTC),
        )
        _write_atomically(self._bytes_path(blob_id), content)
        self._write_document(blob_id, document)
        log.debug("Created blob %s in blob store %s", blob_id, self.name)

        if self.reconciliation_log is not None:
            self.reconciliation_log.log_blob_created(self, blob_id)
        return self._to_blob(blob_id, document)

    def blob_ids(self) -> Iterator[BlobId]:
        """Lazily yield the ids of stored blobs, in directory order."""
        with os.scandir(self.content_dir) as entries:
            for entry in entries:
                name = entry.name
                if not name.endswith(PROPERTIES_SUFFIX) or name.startswith("."):
                    continue
                stem = name.removesuffix(PROPERTIES_SUFFIX)
                if stem.startswith(TEMPORARY_BLOB_ID_PREFIX):
                    continue
                yield BlobId(stem)

    def get(self, blob_id: BlobId, *, include_deleted: bool = False) -> Blob | None:
        document = self._read_document(blob_id)
        if document is None or not self._bytes_path(blob_id).exists():
            return None
        if document.deleted and not include_deleted:
            return None
        return self._to_blob(blob_id, document)

    def get_blob_attributes(self, blob_id: BlobId) -> BlobAttributes | None:
        document = self._read_document(blob_id)
        if document is None:
            return None
        return BlobAttributes(
            deleted=document.deleted,
            deleted_reason=document.deleted_reason,
            properties=document.to_properties(),
            metrics=document.metrics,
        )

    def delete(self, blob_id: BlobId, reason: str) -> bool:
        """Soft-delete a blob; return ``False`` if it is missing or already deleted."""

        document = self._read_document(blob_id)
        if document is None or document.deleted:
            return False
        self._write_document(
            blob_id, document.model_copy(update={"deleted": True, "deleted_reason": reason})
        )
        log.debug("Soft-deleted blob %s: %s", blob_id, reason)
        return True

    def delete_hard(self, blob_id: BlobId) -> bool:
        existed = False
        for path in (self._bytes_path(blob_id), self._properties_path(blob_id)):
            if path.exists():
                path.unlink()
                existed = True
        return existed

    def undelete(
        self,
        usage_checker: BlobStoreUsageChecker | None,
        blob_id: BlobId,
        attributes: BlobAttributes,
        dry_run: bool,  # noqa: FBT001
    ) -> bool:
        """Clear the deleted flag of a blob that is still in use.

        On a dry run the blob is reported as undeleted but its flag is left as is.
        """

        if not attributes.deleted:
            return False

        blob_name = (attributes.properties or {}).get(BLOB_NAME_PROPERTY)
        if usage_checker is not None and not usage_checker.is_blob_in_use(self, blob_id, blob_name):
            log.debug("Blob %s is not in use, leaving it deleted", blob_id)
            return False

        log.info("%sUn-deleting blob %s (%s)", dry_run_prefix(dry_run), blob_id, blob_name)
        if dry_run:
            return True

        document = self._read_document(blob_id)
        if document is None:
            return False
        self._write_document(
            blob_id, document.model_copy(update={"deleted": False, "deleted_reason": None})
        )
        return True

    def _bytes_path(self, blob_id: BlobId) -> Path:
        return self.content_dir / f"{blob_id.value}{BYTES_SUFFIX}"

    def _properties_path(self, blob_id: BlobId) -> Path:
        return self.content_dir / f"{blob_id.value}{PROPERTIES_SUFFIX}"

    def _read_document(self, blob_id: BlobId) -> BlobPropertiesDocument | None:
        path = self._properties_path(blob_id)
        try:
            payload = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            return BlobPropertiesDocument.model_validate_json(payload)
        except ValidationError as exc:
            raise BlobStoreError(f"Corrupt properties for blob {blob_id}: {path}") from exc

    def _write_document(self, blob_id: BlobId, document: BlobPropertiesDocument) -> None:
        _write_atomically(self._properties_path(blob_id), document.to_json().encode("utf-8"))

    def _to_blob(self, blob_id: BlobId, document: BlobPropertiesDocument) -> Blob:
        bytes_path = self._bytes_path(blob_id)

        def _open() -> BinaryIO:
            return bytes_path.open("rb")

        return Blob(
            id=blob_id,
            headers=dict(document.headers),
            metrics=document.metrics,
            opener=_open,
        )


class FileBlobStoreManager:
    """Blob stores living in sub-directories of ``blobs_root``, one per store name."""

    def __init__(self, blobs_root: Path, *, reconciliation_log: ReconciliationLog | None = None) -> None:
        self.blobs_root = blobs_root
        self.reconciliation_log = reconciliation_log
        self._stores: dict[str, FileBlobStore] = {}

    def get(self, name: str) -> FileBlobStore | None:
        if name in self._stores:
            return self._stores[name]
        root = self.blobs_root / name
        if not root.is_dir():
            return None
        return self._open(name, root)

    def create(self, name: str) -> FileBlobStore:
        root = self.blobs_root / name
        root.mkdir(parents=True, exist_ok=True)
        return self.get(name) or self._open(name, root)

    def _open(self, name: str, root: Path) -> FileBlobStore:
        store = FileBlobStore(name, root, reconciliation_log=self.reconciliation_log)
        self._stores[name] = store
        return store


def _write_atomically(path: Path, payload: bytes) -> None:
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_bytes(payload)
    os.replace(tmp_path, path)


__all__ = ["FileBlobStore", "FileBlobStoreManager"]
