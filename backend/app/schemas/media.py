from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransformationSpec(BaseModel):
    """One step of an ImageKit URL transformation chain."""

    model_config = ConfigDict(frozen=True)

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    crop_mode: str | None = None
    quality: int | None = Field(default=None, ge=1, le=100)

    def to_options(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class StoredObject(BaseModel):
    """Upload response returned by the media store."""

    model_config = ConfigDict(frozen=True)

    url: str
    file_id: str
    name: str
    width: int | None = None
    height: int | None = None
    size: int
    file_path: str | None = None
