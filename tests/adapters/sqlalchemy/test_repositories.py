from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import IntegrityError

from blobmend.adapters.sqlalchemy import SqlAlchemyAssetRepository, SqlAlchemyRepositoryManager
from blobmend.domain.model import RepositoryType
from tests.helpers.blob_stores import make_asset, make_repository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_repository_round_trip(sqlite_session: Session) -> None:
    manager = SqlAlchemyRepositoryManager(sqlite_session)
    manager.add(make_repository("raw-group", repository_type=RepositoryType.GROUP))
    sqlite_session.commit()
    sqlite_session.expunge_all()

    repository = manager.get("raw-group")

    assert repository is not None
    assert repository.type is RepositoryType.GROUP
    assert repository.has_own_storage is False
    assert manager.get("missing") is None


def test_browse_for_blob_store_is_sorted_and_filtered(sqlite_session: Session) -> None:
    manager = SqlAlchemyRepositoryManager(sqlite_session)
    for repository in (
        make_repository("zeta"),
        make_repository("alpha"),
        make_repository("other", blob_store_name="second"),
    ):
        manager.add(repository)
    sqlite_session.commit()

    names = [repository.name for repository in manager.browse_for_blob_store("default")]

    assert names == ["alpha", "zeta"]


def test_asset_queries(sqlite_session: Session) -> None:
    SqlAlchemyRepositoryManager(sqlite_session).add(make_repository())
    assets = SqlAlchemyAssetRepository(sqlite_session)
    assets.add(make_asset("/b", blob_id="blob-b"))
    assets.add(make_asset("/a", blob_id="blob-a"))
    sqlite_session.commit()

    assert [asset.name for asset in assets.browse("raw-hosted")] == ["/a", "/b"]
    found = assets.find("raw-hosted", "/a")
    assert found is not None
    assert found.blob_id == "blob-a"
    assert assets.exists_for_blob("default", "blob-b") is True
    assert assets.exists_for_blob("second", "blob-b") is False

    assets.delete(found)
    sqlite_session.commit()

    assert assets.find("raw-hosted", "/a") is None


def test_asset_names_are_unique_per_repository(sqlite_session: Session) -> None:
    SqlAlchemyRepositoryManager(sqlite_session).add(make_repository())
    assets = SqlAlchemyAssetRepository(sqlite_session)
    assets.add(make_asset("/a", blob_id="one"))
    assets.add(make_asset("/a", blob_id="two"))

    with pytest.raises(IntegrityError):
        sqlite_session.commit()
