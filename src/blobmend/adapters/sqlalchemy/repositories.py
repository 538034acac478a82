"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import exists, select

from blobmend.adapters.sqlalchemy.mappings import asset_table, repository_table
from blobmend.domain.model import Asset, Repository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyRepositoryManager:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, repository: Repository) -> None:
        self.session.add(repository)

    def get(self, name: str) -> Repository | None:
        return self.session.get(Repository, name)

    def browse_for_blob_store(self, blob_store_name: str) -> list[Repository]:
        stmt = (
            select(Repository)
            .where(repository_table.c.blob_store_name == blob_store_name)
            .order_by(repository_table.c.name)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyAssetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, asset: Asset) -> None:
        self.session.add(asset)

    def find(self, repository_name: str, name: str) -> Asset | None:
        stmt = (
            select(Asset)
            .where(asset_table.c.repository_name == repository_name)
            .where(asset_table.c.name == name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def browse(self, repository_name: str) -> list[Asset]:
        stmt = (
            select(Asset)
            .where(asset_table.c.repository_name == repository_name)
            .order_by(asset_table.c.name)
        )
        return list(self.session.execute(stmt).scalars())

    def delete(self, asset: Asset) -> None:
        self.session.delete(asset)

    def exists_for_blob(self, blob_store_name: str, blob_id: str) -> bool:
        stmt = select(
            exists()
            .where(asset_table.c.blob_store_name == blob_store_name)
            .where(asset_table.c.blob_id == blob_id)
        )
        return bool(self.session.execute(stmt).scalar())
