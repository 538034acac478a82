from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from blobmend.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMetadataUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.blob_stores import make_repository

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        SqlAlchemyMetadataUnitOfWork()


def test_startup_refuses_to_reconfigure_without_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        assert is_started() is True
        assert configured_engine() is sqlite_engine
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
    finally:
        shutdown()

    assert is_started() is False


def test_rollback_on_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMetadataUnitOfWork],
) -> None:
    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.repositories.add(make_repository())
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.repositories.get("raw-hosted") is None


def test_repositories_unavailable_outside_context(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMetadataUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories
