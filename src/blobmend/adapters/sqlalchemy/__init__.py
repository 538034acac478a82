"""SQLAlchemy adapter package for blobmend."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyAssetRepository, SqlAlchemyRepositoryManager
from .unit_of_work import SqlAlchemyMetadataUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyAssetRepository",
    "SqlAlchemyMetadataUnitOfWork",
    "SqlAlchemyRepositoryManager",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "startup",
]
