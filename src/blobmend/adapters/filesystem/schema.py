"""Pydantic model of the ``.properties`` document stored next to each blob."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blobmend.domain.model import (
    CREATION_TIME_PROPERTY,
    DELETED_PROPERTY,
    DELETED_REASON_PROPERTY,
    HEADER_PREFIX,
    SHA1_PROPERTY,
    SIZE_PROPERTY,
    BlobMetrics,
)


class BlobPropertiesDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    headers: dict[str, str] = Field(default_factory=dict)
    sha1: str
    size: int = Field(ge=0)
    creation_time: datetime = Field(alias="creationTime")
    deleted: bool = False
    deleted_reason: str | None = Field(default=None, alias="deletedReason")

    @field_validator("creation_time")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @property
    def metrics(self) -> BlobMetrics:
        return BlobMetrics(sha1=self.sha1, size=self.size, creation_time=self.creation_time)

    def to_properties(self) -> dict[str, str]:
        """Flatten into the property bag: ``@``-prefixed headers plus metrics."""

        properties = {f"{HEADER_PREFIX}{name}": value for name, value in self.headers.items()}
        properties[SHA1_PROPERTY] = self.sha1
        properties[SIZE_PROPERTY] = str(self.size)
        properties[CREATION_TIME_PROPERTY] = self.creation_time.isoformat()
        if self.deleted:
            properties[DELETED_PROPERTY] = "true"
            if self.deleted_reason:
                properties[DELETED_REASON_PROPERTY] = self.deleted_reason
        return properties

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
