"""Repositories and the assets they expose."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


class RepositoryType(StrEnum):
    HOSTED = "hosted"
    PROXY = "proxy"
    GROUP = "group"


@dataclass(eq=False, kw_only=True)
class Repository:
    """A named repository of one format, storing its content in one blob store."""

    name: str
    format: str
    type: RepositoryType = RepositoryType.HOSTED
    blob_store_name: str

    @property
    def has_own_storage(self) -> bool:
        # group repositories only aggregate their members
        return self.type is not RepositoryType.GROUP


@dataclass(eq=False, kw_only=True)
class Asset:
    """Metadata record pointing at the blob that holds an asset's content."""

    id: UUID = field(default_factory=new_id)
    repository_name: str
    name: str
    blob_store_name: str
    blob_id: str
    sha1: str | None = None
    size: int | None = None
    content_type: str | None = None
