"""
Domain models for client-side token persistence.
"""

from typing import Optional

from pydantic import BaseModel, Field


class StoredTokens(BaseModel):
    """Token triple as read back from client storage; any field may be absent."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[int] = Field(
        None, description="Absolute access token expiry in epoch milliseconds."
    )


class CallbackTokens(BaseModel):
    """Tokens carried on the front-end callback URL after a successful login."""

    access_token: str
    refresh_token: str
    expires_in: int = Field(..., description="Access token lifetime in seconds.")


__all__ = ["CallbackTokens", "StoredTokens"]
