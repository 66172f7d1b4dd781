"""Exceptions raised by the client library."""

from __future__ import annotations


class SwiperClientError(Exception):
    """Base class for client library failures."""


class TokenRefreshError(SwiperClientError):
    """Raised when the gateway cannot issue a fresh access token."""


class NotAuthenticatedError(SwiperClientError):
    """Raised when no valid access token is available; the user must log in again."""


class SwiperApiError(SwiperClientError):
    """Raised for non-2xx responses from the gateway."""

    def __init__(self, message: str, *, status_code: int, body: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


__all__ = [
    "NotAuthenticatedError",
    "SwiperApiError",
    "SwiperClientError",
    "TokenRefreshError",
]
