"""Validated upload ingestion.

An upload passes through a fixed series of gates (caller, presence, type,
size) before any bytes leave the process. Accepted files are stored under a
caller-scoped key and a resized rendition URL is derived from the stored URL.
"""

import logging
import re
import time
from collections.abc import Callable, Sequence
from typing import Protocol

from app.core.exceptions import MissingFile, PayloadTooLarge, Unauthorized, UnsupportedType
from app.schemas.media import StoredObject, TransformationSpec
from app.schemas.upload import UploadResult

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
DEFAULT_FILE_NAME = "upload"
THUMBNAIL_TRANSFORMATION = TransformationSpec(
    width=400,
    height=300,
    crop_mode="maintain_ar",
    quality=80,
)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class RemoteStore(Protocol):
    async def upload(self, data: bytes, file_name: str, folder: str) -> StoredObject: ...

    def url_for(self, src: str, transformation: Sequence[TransformationSpec]) -> str: ...


def sanitize_file_name(name: str | None) -> str:
    if not name:
        return DEFAULT_FILE_NAME
    return _UNSAFE_CHARS.sub("_", name)


def build_storage_key(caller_id: str, file_name: str | None, timestamp_ms: int) -> str:
    return f"{caller_id}/{timestamp_ms}_{sanitize_file_name(file_name)}"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class UploadIngestor:
    def __init__(
        self,
        store: RemoteStore,
        *,
        folder: str = "/projects",
        max_bytes: int = 5 * 1024 * 1024,
        allowed_types: frozenset[str] = ALLOWED_CONTENT_TYPES,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.folder = folder
        self.max_bytes = max_bytes
        self.allowed_types = allowed_types
        self.clock = clock

    def validate(
        self,
        caller_id: str | None,
        file_bytes: bytes | None,
        declared_content_type: str | None,
    ) -> None:
        if not caller_id:
            raise Unauthorized()
        if not file_bytes:
            raise MissingFile()
        if declared_content_type not in self.allowed_types:
            logger.info("Rejected %s upload from %s", declared_content_type, caller_id)
            raise UnsupportedType()
        if len(file_bytes) > self.max_bytes:
            logger.info("Rejected %d byte upload from %s", len(file_bytes), caller_id)
            raise PayloadTooLarge(self.max_bytes)

    async def ingest(
        self,
        caller_id: str | None,
        file_bytes: bytes | None,
        declared_content_type: str | None,
        suggested_name: str | None = None,
    ) -> UploadResult:
        self.validate(caller_id, file_bytes, declared_content_type)

        key = build_storage_key(caller_id, suggested_name, self.clock())
        stored = await self.store.upload(file_bytes, key, self.folder)
        thumbnail_url = self.store.url_for(stored.url, [THUMBNAIL_TRANSFORMATION])

        return UploadResult(
            canonical_url=stored.url,
            thumbnail_url=thumbnail_url,
            remote_id=stored.file_id,
            width=stored.width,
            height=stored.height,
            byte_size=stored.size,
            stored_name=stored.name,
        )
