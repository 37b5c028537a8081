"""
Typed API errors.

Services raise these; the handlers registered in ``imagia.main`` turn them into
the ``{"status": "ERROR", "message": ..., "data": None}`` envelope and record an
operational log entry.
"""
from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base class: an HTTP status, a human message and the log category it belongs to."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, category: str = "SERVER"):
        self.message = message or self.default_message
        self.category = category
        super().__init__(status_code=self.status_code, detail=self.message)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class QuotaExhausted(ApiError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "No requests left for this plan"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Operation not allowed"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class UpstreamError(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service failed"


class InternalError(ApiError):
    pass
