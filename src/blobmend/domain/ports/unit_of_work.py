"""Transaction boundary around the metadata repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from blobmend.domain.ports.persistence import AssetRepository, RepositoryManager


@dataclass(slots=True)
class MetadataRepositories:
    """Repository and asset metadata, reached through the same session."""

    repositories: RepositoryManager
    assets: AssetRepository


@runtime_checkable
class MetadataUnitOfWork(Protocol):
    """Context manager handing out ``MetadataRepositories``; changes persist on ``commit``."""

    @property
    def repositories(self) -> MetadataRepositories: ...

    def __enter__(self) -> MetadataUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
