"""SQLAlchemy-backed unit of work for repository and asset metadata."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from blobmend.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from blobmend.adapters.sqlalchemy.repositories import (
    SqlAlchemyAssetRepository,
    SqlAlchemyRepositoryManager,
)
from blobmend.config.storage import get_database_config
from blobmend.domain.ports.unit_of_work import MetadataRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the metadata database is used before ``startup`` or out of context."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def session_factory(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError(
                "Metadata database not initialised; call "
                "blobmend.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        return self.sessions


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the metadata database, creating its tables if they do not exist yet."""

    if _STATE.engine is not None and not force:
        raise StartupError("Metadata database already initialised; pass force=True to rebind.")

    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    create_all_tables(engine)
    log.debug("Metadata database bound to %s", engine.url)
    _STATE.bind(engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; later units of work need a new ``startup``."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyMetadataUnitOfWork:
    """One session over repository and asset metadata, rolled back if its block raises.

    Nothing is committed implicitly: callers commit after each change they want kept.
    """

    def __init__(self) -> None:
        self._sessions = _STATE.session_factory()
        self._session: Session | None = None
        self._repositories: MetadataRepositories | None = None

    def __enter__(self) -> SqlAlchemyMetadataUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already active")
        self._session = self._sessions()
        self._repositories = MetadataRepositories(
            repositories=SqlAlchemyRepositoryManager(self._session),
            assets=SqlAlchemyAssetRepository(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active")
        return self._session

    @property
    def repositories(self) -> MetadataRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from blobmend.domain.ports.unit_of_work import MetadataUnitOfWork

    _uow_check: MetadataUnitOfWork = SqlAlchemyMetadataUnitOfWork()
