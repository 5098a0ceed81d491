# detailing/core/exceptions.py
"""Domain exceptions and their HTTP mapping"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DetailingError(Exception):
    """Base class for all domain errors raised by the service layer."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticatedError(DetailingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AccessDeniedError(DetailingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(DetailingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(DetailingError):
    status_code = 422
    default_message = "Invalid request"


class SlotUnavailableError(DetailingError):
    """Raised when a booking write finds its slot already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Time slot is not available"

    def __init__(self, reason: str = None):
        self.reason = reason
        super().__init__(reason)


async def detailing_error_handler(request: Request, exc: DetailingError):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    if exc.status_code >= 500:
        logger.error(f"[{correlation_id}] {exc.__class__.__name__}: {exc.message}")
    else:
        logger.info(f"[{correlation_id}] {exc.__class__.__name__}: {exc.message}")

    content = {"detail": exc.message}
    if isinstance(exc, SlotUnavailableError):
        content["reason"] = exc.reason

    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DetailingError, detailing_error_handler)
