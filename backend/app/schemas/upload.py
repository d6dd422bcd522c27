from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UploadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    canonical_url: str
    thumbnail_url: str
    remote_id: str
    width: int | None = None
    height: int | None = None
    byte_size: int
    stored_name: str


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: Literal[True] = True
    url: str
    thumbnail_url: str = Field(serialization_alias="thumbnailUrl")
    file_id: str = Field(serialization_alias="fileId")
    width: int | None = None
    height: int | None = None
    size: int
    name: str

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponse":
        return cls(
            url=result.canonical_url,
            thumbnail_url=result.thumbnail_url,
            file_id=result.remote_id,
            width=result.width,
            height=result.height,
            size=result.byte_size,
            name=result.stored_name,
        )


class UploadFailure(BaseModel):
    success: Literal[False] = False
    error: str = "Failed to upload image"
    details: str


class ErrorResponse(BaseModel):
    error: str
