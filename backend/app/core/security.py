from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


class TokenError(Exception):
    """Raised when token validation fails."""


def decode_session_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    options = {"verify_iss": settings.auth_jwt_issuer is not None}
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_key,
            algorithms=[settings.auth_jwt_algorithm],
            issuer=settings.auth_jwt_issuer,
            options=options,
        )
    except JWTError as exc:
        raise TokenError("Invalid token") from exc
