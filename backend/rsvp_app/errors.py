"""Domain exceptions and their HTTP rendering.

Services raise these; the handlers registered in ``rsvp_app.main`` turn them
into ``{"error": ...}`` JSON bodies. Internal detail stays in the logs.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class RSVPError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(RSVPError):
    status_code = 400
    default_message = "Invalid request"


class CapacityExceededError(ValidationError):
    """Too many attendees for the guest's allowance."""

    def __init__(self, allowed: int, received: int):
        super().__init__(
            f"Too many guests: {received} submitted, {allowed} allowed",
            allowed=allowed,
            received=received,
        )
        self.allowed = allowed
        self.received = received


class GuestNotFoundError(RSVPError):
    # Submission for a name missing from the directory is a bad request, not a 404.
    status_code = 400
    default_message = "Guest not found on the invitation list"


class NotFoundError(RSVPError):
    status_code = 404
    default_message = "Not found"


class ConflictError(RSVPError):
    status_code = 409
    default_message = "Conflict"


class UnauthorizedError(RSVPError):
    status_code = 401
    default_message = "Unauthorized"


class ServerError(RSVPError):
    status_code = 500
    default_message = "Server error"


async def _rsvp_error_handler(request: Request, exc: RSVPError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=ServerError().to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RSVPError, _rsvp_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
