"""
Spotify OAuth utilities.

These helpers build the consent URL and drive the authorization-code and
refresh-token grants against the Spotify accounts service.
"""

from __future__ import annotations

import secrets
import string
from typing import Tuple
from urllib.parse import urlencode

import httpx

from fastapi import status

from music_swiper.core.config import OAuthSettings, SpotifySettings

_STATE_ALPHABET = string.ascii_letters + string.digits


def generate_state_nonce(length: int = 16) -> str:
    """Return a random alphanumeric value used as the OAuth ``state`` parameter."""
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(length))


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint rejects a grant or cannot be reached."""


class SpotifyOAuthClient:
    """Build Spotify authorization URLs and exchange authorization codes."""

    AUTHORIZE_PATH = "/authorize"
    TOKEN_PATH = "/api/token"

    def __init__(
        self,
        spotify_settings: SpotifySettings,
        oauth_settings: OAuthSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._spotify = spotify_settings
        self._oauth = oauth_settings
        self._transport = transport

    @property
    def token_url(self) -> str:
        return f"{self._spotify.accounts_base_url.rstrip('/')}{self.TOKEN_PATH}"

    def build_authorization_url(self, state: str) -> str:
        """Construct the Spotify consent URL."""
        params = {
            "client_id": self._spotify.client_id,
            "response_type": "code",
            "redirect_uri": str(self._spotify.redirect_uri),
            "scope": " ".join(self._oauth.scopes),
            "state": state,
        }
        base = self._spotify.accounts_base_url.rstrip("/")
        return f"{base}{self.AUTHORIZE_PATH}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> Tuple[str, str, int]:
        """
        Exchange an authorization code for tokens.

        Returns a tuple of (access_token, refresh_token, expires_in_seconds).
        """
        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": str(self._spotify.redirect_uri),
        }
        token_payload = await self._post_token(payload)

        access_token = token_payload.get("access_token")
        refresh_token = token_payload.get("refresh_token")
        expires_in = token_payload.get("expires_in")

        if not access_token or not refresh_token or not expires_in:
            raise OAuthTokenExchangeError("Incomplete token payload returned from Spotify.")

        return access_token, refresh_token, int(expires_in)

    async def refresh_token(self, refresh_token: str) -> Tuple[str, int]:
        """Obtain a fresh access token; any rotated refresh token is ignored."""
        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        token_payload = await self._post_token(payload)

        access_token = token_payload.get("access_token")
        expires_in = token_payload.get("expires_in")

        if not access_token or not expires_in:
            raise OAuthTokenExchangeError("Incomplete refresh payload returned from Spotify.")

        return access_token, int(expires_in)

    async def _post_token(self, payload: dict[str, str]) -> dict:
        auth = httpx.BasicAuth(self._spotify.client_id, self._spotify.client_secret)
        try:
            async with httpx.AsyncClient(
                timeout=self._spotify.http_timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.token_url, data=payload, auth=auth)
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if response.status_code != status.HTTP_200_OK:
            raise OAuthTokenExchangeError(response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise OAuthTokenExchangeError("Token endpoint returned invalid JSON.") from exc


__all__ = [
    "OAuthTokenExchangeError",
    "SpotifyOAuthClient",
    "generate_state_nonce",
]
