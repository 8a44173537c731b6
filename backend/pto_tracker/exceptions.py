import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Service-level failure carrying the HTTP status to report."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def _error_response(error: str, detail: str | None, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, status_code=status_code).model_dump(),
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into ``"body.field: message"`` pairs."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid')}" if location else str(err.get("msg", "invalid")))
    return "; ".join(parts)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    elif exc.status_code == status.HTTP_409_CONFLICT:
        logger.info("%s %s conflict: %s", request.method, request.url.path, exc.message)
    return _error_response(type(exc).__name__, exc.message, exc.status_code)


async def _validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response("ValidationError", _format_validation_errors(exc), status.HTTP_422_UNPROCESSABLE_ENTITY)


async def _integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # Reached when a concurrent writer slips past a service's uniqueness pre-check.
    logger.warning("%s %s hit a constraint: %s", request.method, request.url.path, exc.orig)
    return _error_response("ConflictError", "Conflicting record", status.HTTP_409_CONFLICT)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_exception_handler)  # type: ignore[arg-type]
