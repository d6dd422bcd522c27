from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.exceptions import IngestionError
from app.schemas.upload import ErrorResponse
from app.services.ingestion import UploadIngestor
from app.services.media_store import get_media_store, reset_media_store
from app.api.routers import uploads as uploads_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    store = get_media_store()
    app.state.media_store = store
    app.state.upload_ingestor = UploadIngestor(
        store,
        folder=settings.imagekit_upload_folder,
        max_bytes=settings.max_upload_bytes,
    )

    yield
    reset_media_store()


async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


def create_app() -> FastAPI:
    # Raises ConfigurationError before anything is served.
    settings = get_settings()
    app = FastAPI(
        debug=settings.debug,
        title="Image Upload API",
        lifespan=lifespan,
    )

    app.add_exception_handler(IngestionError, ingestion_error_handler)
    app.include_router(uploads_router.router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
