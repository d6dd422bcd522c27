import logging

from fastapi import Request

from app.core.security import TokenError, decode_session_token

logger = logging.getLogger(__name__)

SESSION_COOKIE = "__session"


def _extract_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(SESSION_COOKIE) or None


def resolve_caller_id(request: Request) -> str | None:
    """Return the authenticated caller's id, or None when it cannot be resolved."""
    token = _extract_token(request)
    if token is None:
        return None

    try:
        payload = decode_session_token(token)
    except TokenError:
        logger.info("Rejected session token for %s", request.url.path)
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
