from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from blobmend.adapters.filesystem import FileBlobStore, FileBlobStoreManager
from blobmend.domain.errors import BlobStoreError
from blobmend.domain.model import (
    BLOB_NAME_HEADER,
    BLOB_NAME_PROPERTY,
    REPO_NAME_HEADER,
    REPO_NAME_PROPERTY,
    BlobId,
)
from tests.helpers.blob_stores import AlwaysInUse, FakeReconciliationLog

if TYPE_CHECKING:
    from pathlib import Path

    from blobmend.domain.model import BlobAttributes
    from blobmend.domain.ports import BlobStore


class _RecordingLog(FakeReconciliationLog):
    def __init__(self) -> None:
        super().__init__()
        self.created: list[BlobId] = []

    def log_blob_created(self, blob_store: BlobStore, blob_id: BlobId) -> None:
        self.created.append(blob_id)


class _NeverInUse:
    def is_blob_in_use(self, blob_store: BlobStore, blob_id: BlobId, blob_name: str | None) -> bool:
        _ = (blob_store, blob_id, blob_name)
        return False


_HEADERS = {BLOB_NAME_HEADER: "/docs/a.txt", REPO_NAME_HEADER: "raw-hosted"}


@pytest.fixture
def store(tmp_path: Path) -> FileBlobStore:
    return FileBlobStore("default", tmp_path / "default")


def _attributes(store: FileBlobStore, blob_id: BlobId) -> BlobAttributes:
    attributes = store.get_blob_attributes(blob_id)
    assert attributes is not None
    return attributes


def test_create_and_read_back(store: FileBlobStore) -> None:
    blob = store.create(b"hello", _HEADERS)

    fetched = store.get(blob.id)
    attributes = _attributes(store, blob.id)

    assert fetched is not None
    assert fetched.read() == b"hello"
    assert fetched.metrics.size == 5
    assert attributes.deleted is False
    assert attributes.properties is not None
    assert attributes.properties[BLOB_NAME_PROPERTY] == "/docs/a.txt"
    assert attributes.properties[REPO_NAME_PROPERTY] == "raw-hosted"
    assert list(store.blob_ids()) == [blob.id]


def test_create_records_in_reconciliation_log(tmp_path: Path) -> None:
    reconciliation_log = _RecordingLog()
    store = FileBlobStore("default", tmp_path, reconciliation_log=reconciliation_log)

    blob = store.create(b"x", _HEADERS)

    assert reconciliation_log.created == [blob.id]


def test_temporary_blobs_are_not_enumerated(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS, temporary=True)

    assert blob.id.is_temporary
    assert list(store.blob_ids()) == []


def test_blob_ids_are_yielded_lazily(store: FileBlobStore) -> None:
    created = {store.create(f"blob-{index}".encode(), _HEADERS).id for index in range(3)}

    blob_ids = store.blob_ids()
    first = next(blob_ids)

    assert first in created
    assert {first, *blob_ids} == created


def test_soft_deleted_blob_is_hidden_unless_requested(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)

    assert store.delete(blob.id, "cleanup") is True
    assert store.delete(blob.id, "again") is False

    assert store.get(blob.id) is None
    assert store.get(blob.id, include_deleted=True) is not None
    attributes = _attributes(store, blob.id)
    assert attributes.deleted is True
    assert attributes.deleted_reason == "cleanup"
    assert list(store.blob_ids()) == [blob.id]


def test_undelete_clears_flag_when_in_use(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)
    store.delete(blob.id, "cleanup")

    attributes = _attributes(store, blob.id)

    assert store.undelete(AlwaysInUse(), blob.id, attributes, False) is True  # noqa: FBT003
    assert _attributes(store, blob.id).deleted is False


def test_undelete_dry_run_reports_without_writing(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)
    store.delete(blob.id, "cleanup")

    attributes = _attributes(store, blob.id)

    assert store.undelete(AlwaysInUse(), blob.id, attributes, True) is True  # noqa: FBT003
    assert _attributes(store, blob.id).deleted is True


def test_undelete_keeps_unused_blob_deleted(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)
    store.delete(blob.id, "cleanup")

    attributes = _attributes(store, blob.id)

    assert store.undelete(_NeverInUse(), blob.id, attributes, False) is False  # noqa: FBT003
    assert _attributes(store, blob.id).deleted is True


def test_undelete_of_live_blob_is_a_no_op(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)

    attributes = _attributes(store, blob.id)

    assert store.undelete(None, blob.id, attributes, False) is False  # noqa: FBT003


def test_missing_blob(store: FileBlobStore) -> None:
    assert store.get(BlobId("nope")) is None
    assert store.get_blob_attributes(BlobId("nope")) is None


def test_blob_without_bytes_is_not_returned(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)
    (store.content_dir / f"{blob.id}.bytes").unlink()

    assert store.get(blob.id) is None
    assert store.get_blob_attributes(blob.id) is not None


def test_hard_delete_removes_files(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)

    assert store.delete_hard(blob.id) is True
    assert store.delete_hard(blob.id) is False
    assert list(store.blob_ids()) == []


def test_corrupt_properties_raise(store: FileBlobStore) -> None:
    blob = store.create(b"x", _HEADERS)
    (store.content_dir / f"{blob.id}.properties").write_text("{", encoding="utf-8")

    with pytest.raises(BlobStoreError, match="Corrupt properties"):
        store.get_blob_attributes(blob.id)


def test_manager_only_opens_existing_stores(tmp_path: Path) -> None:
    manager = FileBlobStoreManager(tmp_path)

    assert manager.get("default") is None
    created = manager.create("default")
    assert manager.get("default") is created
    assert FileBlobStoreManager(tmp_path).get("default") is not None
