from fastapi import status


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


class IngestionError(Exception):
    """Base class for upload rejections that map to a client error."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Invalid upload"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(IngestionError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class MissingFile(IngestionError):
    message = "No file provided"


class UnsupportedType(IngestionError):
    message = "Unsupported file type"


def format_byte_limit(max_bytes: int) -> str:
    if max_bytes >= 1024 * 1024 and max_bytes % (1024 * 1024) == 0:
        return f"{max_bytes // (1024 * 1024)}MB"
    if max_bytes >= 1024 and max_bytes % 1024 == 0:
        return f"{max_bytes // 1024}KB"
    return f"{max_bytes} bytes"


class PayloadTooLarge(IngestionError):
    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"File too large (max {format_byte_limit(max_bytes)} allowed)")
