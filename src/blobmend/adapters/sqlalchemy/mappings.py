"""SQLAlchemy mapping metadata for repositories and assets."""

from __future__ import annotations

import logging
import uuid
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from blobmend.domain.model import Asset, Repository, RepositoryType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

repository_table = Table(
    "repository",
    mapper_registry.metadata,
    Column("name", String, primary_key=True),
    Column("format", String, nullable=False),
    Column("type", Enum(RepositoryType, native_enum=False), nullable=False),
    Column("blob_store_name", String, nullable=False, index=True),
)

asset_table = Table(
    "asset",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "repository_name",
        String,
        ForeignKey("repository.name", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String, nullable=False),
    Column("blob_store_name", String, nullable=False),
    Column("blob_id", String, nullable=False),
    Column("sha1", String(40), nullable=True),
    Column("size", Integer, nullable=True),
    Column("content_type", String, nullable=True),
    UniqueConstraint("repository_name", "name"),
    Index("ix_asset_blob_ref", "blob_store_name", "blob_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(Repository, repository_table)
    mapper_registry.map_imperatively(Asset, asset_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
