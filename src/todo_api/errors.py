from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoServiceError(Exception):
    """
    Base class for errors that map onto a client-visible HTTP status.

    Subclasses set ``status_code`` and may carry extra response headers and a
    list of structured details (e.g. pydantic error entries).
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        detail: Optional[List[Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.detail = detail
        self.headers = headers
        super().__init__(self.message)

    @property
    def error(self) -> str:
        return type(self).__name__


class InvalidParameter(TodoServiceError):
    """Bad pagination or other query parameter."""

    default_message = "Invalid query parameter"


class InvalidPayload(TodoServiceError):
    """Malformed JSON, or a missing or mistyped field."""

    default_message = "Invalid todo payload"


class Conflict(TodoServiceError):
    """A todo with the same id already exists. Surfaced as 400."""

    default_message = "Todo with this id already exists"


class UnsupportedContentType(TodoServiceError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    default_message = "Content-Type must be application/json"


class Unauthorized(TodoServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Basic"})


class NotFound(TodoServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Todo not found"


def _error_body(error: str, message: str, detail: Optional[List[Any]] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error, "message": message}
    if detail is not None:
        body["detail"] = detail
    return body


async def todo_service_error_handler(request: Request, exc: TodoServiceError) -> JSONResponse:
    """
    Render a domain error.

    Response format:
        {
            "error": "<exception class name>",
            "message": "<human readable message>",
            "detail": [...]  # only when structured details exist
        }
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error, exc.message, exc.detail),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Map FastAPI request validation failures onto the 400 taxonomy.

    Failures located in the query string are pagination errors; anything else
    (body shape, field types, malformed JSON) is an invalid payload.
    """
    errors = exc.errors()
    if errors and all((e.get("loc") or ("",))[0] in ("query", "path") for e in errors):
        err: TodoServiceError = InvalidParameter(detail=_jsonable(errors))
    else:
        err = InvalidPayload(detail=_jsonable(errors))
    return await todo_service_error_handler(request, err)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("InternalServerError", "Internal server error"),
    )


def _jsonable(errors: List[Any]) -> List[Any]:
    # pydantic error entries may carry the raw exception under "ctx"
    cleaned = []
    for e in errors:
        entry = {k: v for k, v in e.items() if k not in ("ctx", "url")}
        if isinstance(entry.get("input"), bytes):
            entry["input"] = entry["input"].decode("utf-8", errors="replace")
        cleaned.append(entry)
    return cleaned


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(TodoServiceError, todo_service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
