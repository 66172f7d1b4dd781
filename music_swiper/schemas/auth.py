"""Schemas related to OAuth flows."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RefreshTokenResponse(BaseModel):
    """Fresh access token issued from a refresh token."""

    access_token: str = Field(..., description="New bearer token for the Web API.")
    expires_in: int = Field(..., description="Lifetime of the access token in seconds.")


__all__ = ["RefreshTokenResponse"]
