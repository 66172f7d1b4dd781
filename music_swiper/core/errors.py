"""Application error type and its JSON rendering."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Raised by routes to short-circuit with a structured ``{error, message}`` body."""

    def __init__(
        self, status_code: int, error: str, message: str | None = None
    ) -> None:
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid {location or 'request body'}: {first.get('msg')}"


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed input as a 400 in the same shape as every other error."""
    error = ApiError(HTTPStatus.BAD_REQUEST, "Bad Request", _describe_validation_error(exc))
    return await api_error_handler(request, error)


__all__ = ["ApiError", "api_error_handler", "validation_error_handler"]
