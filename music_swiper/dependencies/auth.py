"""Bearer token extraction for protected endpoints."""

from __future__ import annotations

from http import HTTPStatus

from fastapi import Header

from music_swiper.core.errors import ApiError


def require_access_token(
    authorization: str | None = Header(default=None),
) -> str:
    """Return the token from ``Authorization: Bearer <token>`` or reject with 401."""
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise ApiError(
            HTTPStatus.UNAUTHORIZED,
            "Unauthorized",
            "Access token is required",
        )
    return token


__all__ = ["require_access_token"]
