"""Domain errors and the handlers that turn them into HTTP responses."""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FilesManagerError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(FilesManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ValidationError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(FilesManagerError):
    """Raised both for missing records and for records the caller may not see."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class IsFolder(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A folder doesn't have content"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_files_manager_errors(request: Request, exc: FilesManagerError) -> JSONResponse:
    """Render a domain error as ``{"error": message}`` with its status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first malformed field of a request as a 400."""
    errors = exc.errors()
    if not errors:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "header", "path"))
    if first.get("type") == "missing" and field:
        return error_response(status.HTTP_400_BAD_REQUEST, f"Missing {field}")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(status.HTTP_400_BAD_REQUEST, message)


FRAMEWORK_MESSAGES = {
    Unauthorized.status_code: Unauthorized.default_message,
    NotFound.status_code: NotFound.default_message,
}


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework-raised HTTP errors in the same ``{"error": ...}`` shape.

    401s and 404s carry the same message as their domain counterparts.
    """
    message = FRAMEWORK_MESSAGES.get(exc.status_code, str(exc.detail))
    response = error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates during the request."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
