"""Exception types and handlers that shape error responses.

Every error body carries a human readable ``message``; validation errors
additionally carry ``errors``, a map of field name to messages.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.results import FieldErrors, add_error, summarize
from app.services.tasks import TaskNotFoundError

logger = logging.getLogger(__name__)


class ValidationFailed(Exception):
    """Raised by endpoints when a service returned a field-error map."""

    def __init__(self, errors: FieldErrors) -> None:
        super().__init__(summarize(errors))
        self.errors = errors


def validation_response(errors: FieldErrors) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": summarize(errors), "errors": errors},
    )


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return validation_response(exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic request errors in the same field-map shape."""
    errors: FieldErrors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        add_error(errors, field, error.get("msg", "Invalid value."))
    return validation_response(errors)


async def task_not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": "Task not found"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure server side and return a generic message."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all error handlers on the application."""
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(TaskNotFoundError, task_not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
