from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from blobmend.adapters.reconciliation_log import (
    RECONCILIATION_LOGGER_NAME,
    ReconciliationLogHandler,
)
from blobmend.adapters.sqlalchemy import create_all_tables, start_mappers
from blobmend.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMetadataUnitOfWork,
    shutdown,
    startup,
)
from blobmend.config.storage import StorageConfig

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyMetadataUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyMetadataUnitOfWork:
        return SqlAlchemyMetadataUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def storage_config(tmp_path: Path) -> StorageConfig:
    return StorageConfig(work_dir=tmp_path / "work")


@pytest.fixture(autouse=True)
def reset_reconciliation_logger() -> Iterator[None]:
    yield
    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith(RECONCILIATION_LOGGER_NAME):
            continue
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if isinstance(handler, ReconciliationLogHandler):
                logger.removeHandler(handler)
                handler.close()
