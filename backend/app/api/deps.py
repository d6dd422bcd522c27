from fastapi import Request

from app.core.exceptions import Unauthorized
from app.services.auth import resolve_caller_id
from app.services.ingestion import UploadIngestor


async def get_caller_id(request: Request) -> str:
    caller_id = resolve_caller_id(request)
    if not caller_id:
        raise Unauthorized()
    return caller_id


def get_ingestor(request: Request) -> UploadIngestor:
    return request.app.state.upload_ingestor
