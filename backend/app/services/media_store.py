import asyncio
import logging
from collections.abc import Sequence

import requests
from imagekitio import ImageKit
from imagekitio.exceptions.BadRequestException import BadRequestException
from imagekitio.exceptions.ForbiddenException import ForbiddenException
from imagekitio.exceptions.NotFoundException import NotFoundException
from imagekitio.exceptions.UnauthorizedException import UnauthorizedException
from imagekitio.models.UploadFileRequestOptions import UploadFileRequestOptions

from app.core.config import Settings, get_settings
from app.schemas.media import StoredObject, TransformationSpec

logger = logging.getLogger(__name__)

_REJECTIONS = (BadRequestException, UnauthorizedException, ForbiddenException, NotFoundException)


class StoreFailure(Exception):
    """Raised when the remote media store cannot complete an operation."""


class StoreUnavailable(StoreFailure):
    """The store could not be reached or failed on its side."""


class StoreRejected(StoreFailure):
    """The store refused the request."""


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    return str(message) if message else (str(exc) or exc.__class__.__name__)


class MediaStore:
    """ImageKit-backed store for uploaded images."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: ImageKit | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or ImageKit(
            private_key=self.settings.imagekit_private_key,
            public_key=self.settings.imagekit_public_key,
            url_endpoint=str(self.settings.imagekit_url_endpoint).rstrip("/"),
        )

    async def upload(self, data: bytes, file_name: str, folder: str) -> StoredObject:
        def _upload():
            return self.client.upload_file(
                file=data,
                file_name=file_name,
                options=UploadFileRequestOptions(folder=folder),
            )

        try:
            result = await asyncio.to_thread(_upload)
            stored = StoredObject(
                url=result.url,
                file_id=result.file_id,
                name=result.name,
                width=result.width,
                height=result.height,
                size=result.size,
                file_path=result.file_path,
            )
        except _REJECTIONS as exc:
            raise StoreRejected(_error_message(exc)) from exc
        except requests.RequestException as exc:
            raise StoreUnavailable(_error_message(exc)) from exc
        except (ValueError, TypeError, AttributeError) as exc:
            # Includes pydantic's ValidationError on an incomplete response.
            raise StoreUnavailable(f"Malformed response from ImageKit: {exc}") from exc
        except Exception as exc:
            raise StoreUnavailable(_error_message(exc)) from exc

        logger.info("Stored %s in ImageKit as %s", file_name, stored.file_id)
        return stored

    def url_for(self, src: str, transformation: Sequence[TransformationSpec]) -> str:
        """Return a URL for ``src`` with the given transformation chain applied.

        ``src`` may be an absolute URL or a path relative to the URL endpoint.
        """
        options: dict = {"transformation": [step.to_options() for step in transformation]}
        if "://" in src:
            options["src"] = src
        else:
            options["path"] = src
        return self.client.url(options)


_media_store: MediaStore | None = None


def get_media_store() -> MediaStore:
    global _media_store
    if _media_store is None:
        _media_store = MediaStore()
    return _media_store


def reset_media_store() -> None:
    global _media_store
    _media_store = None
