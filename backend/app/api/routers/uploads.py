import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from app.api.deps import get_caller_id, get_ingestor
from app.core.exceptions import IngestionError, MissingFile
from app.schemas.upload import ErrorResponse, UploadFailure, UploadResponse
from app.services.ingestion import UploadIngestor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/imagekit", tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": UploadFailure},
    },
)
async def upload_image(
    request: Request,
    caller_id: str = Depends(get_caller_id),
    ingestor: UploadIngestor = Depends(get_ingestor),
):
    form = None
    try:
        # The form is read only once the caller is known.
        form = await request.form()
        upload = form.get("file")
        file_name = form.get("fileName")
        if not isinstance(upload, UploadFile):
            raise MissingFile()
        if not isinstance(file_name, str):
            file_name = None

        data = await upload.read()
        result = await ingestor.ingest(caller_id, data, upload.content_type, file_name)
    except IngestionError:
        raise
    except Exception as exc:
        logger.exception("ImageKit upload failed for %s", caller_id)
        failure = UploadFailure(details=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure.model_dump(),
        )
    finally:
        if form is not None:
            await form.close()

    return UploadResponse.from_result(result)
