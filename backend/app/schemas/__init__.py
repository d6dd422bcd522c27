from app.schemas.media import StoredObject, TransformationSpec
from app.schemas.upload import ErrorResponse, UploadFailure, UploadResponse, UploadResult

__all__ = [
    "StoredObject",
    "TransformationSpec",
    "UploadResult",
    "UploadResponse",
    "UploadFailure",
    "ErrorResponse",
]
