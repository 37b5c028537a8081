# imagia/api/deps.py
from fastapi import Header


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """
    FastAPI dependency returning the caller's token from the Authorization header.

    Accepts ``Bearer <token>`` as well as the bare token value. Returns None when
    the header is absent; routes then fall back to ``token`` in the request body.
    """
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value.split(" ", 1)[1].strip()
    return value or None


def pick_token(header_token: str | None, body_token: str | None) -> str | None:
    """Header first, then body."""
    return header_token or body_token
