"""
Async client for the Music Swiper gateway.

Mirrors what the swipe front-end needs: the login URL, reading tokens off the
OAuth callback URL, and authenticated calls to the track, playlist and
preference endpoints. Every authenticated call goes through
``TokenStore.get_valid_token`` first.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlparse

import httpx
from pydantic import ValidationError

from music_swiper.client.errors import (
    NotAuthenticatedError,
    SwiperApiError,
    TokenRefreshError,
)
from music_swiper.client.token_store import TokenStore
from music_swiper.models.tokens import CallbackTokens

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def tokens_from_callback_url(url: str) -> Optional[CallbackTokens]:
    """Extract the token triple the gateway appends to the front-end callback URL."""
    params = {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}
    try:
        return CallbackTokens(**params)
    except ValidationError:
        return None


class AuthGatewayClient:
    """Unauthenticated calls to the gateway's auth endpoints."""

    def __init__(
        self,
        api_url: str,
        *,
        base_path: str = "/api",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._root = f"{api_url.rstrip('/')}{base_path}"
        self._timeout = timeout
        self._transport = transport

    @property
    def login_url(self) -> str:
        return f"{self._root}/auth/login"

    async def refresh_access_token(self, refresh_token: str) -> Tuple[str, int]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    f"{self._root}/auth/refresh_token",
                    params={"refresh_token": refresh_token},
                )
        except httpx.HTTPError as exc:
            raise TokenRefreshError(f"Refresh request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise TokenRefreshError(
                f"Gateway refused refresh with status {response.status_code}"
            )
        try:
            data = response.json()
            return str(data["access_token"]), int(data["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            raise TokenRefreshError("Gateway returned an invalid refresh payload") from exc


class SwiperApiClient:
    """Authenticated calls to the gateway's passthrough endpoints."""

    def __init__(
        self,
        api_url: str,
        token_store: TokenStore,
        *,
        base_path: str = "/api",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._root = f"{api_url.rstrip('/')}{base_path}"
        self._tokens = token_store
        self._timeout = timeout
        self._transport = transport

    async def authenticated_request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        token = await self._tokens.get_valid_token()
        if not token:
            raise NotAuthenticatedError("No valid token available")

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.request(
                method,
                f"{self._root}{path}",
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            raise SwiperApiError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=body,
            )
        return response.json()

    async def get_recommendations(
        self,
        limit: int = 10,
        seed_genres: Sequence[str] = (),
        seed_artists: Sequence[str] = (),
        seed_tracks: Sequence[str] = (),
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": limit}
        if seed_genres:
            params["seed_genres"] = ",".join(seed_genres)
        if seed_artists:
            params["seed_artists"] = ",".join(seed_artists)
        if seed_tracks:
            params["seed_tracks"] = ",".join(seed_tracks)
        return await self.authenticated_request("GET", "/tracks/recommendations", params=params)

    async def like_track(self, track_id: str) -> Dict[str, Any]:
        return await self.authenticated_request(
            "POST", "/tracks/like", json={"track_id": track_id}
        )

    async def dislike_track(self, track_id: str) -> Dict[str, Any]:
        return await self.authenticated_request(
            "POST", "/tracks/dislike", json={"track_id": track_id}
        )

    async def get_playlists(self) -> Dict[str, Any]:
        return await self.authenticated_request("GET", "/playlists")

    async def get_playlist_details(self, playlist_id: str) -> Dict[str, Any]:
        return await self.authenticated_request("GET", f"/playlists/{playlist_id}")

    async def create_playlist(
        self, name: str, description: Optional[str] = None, public: bool = False
    ) -> Dict[str, Any]:
        return await self.authenticated_request(
            "POST",
            "/playlists",
            json={"name": name, "description": description, "public": public},
        )

    async def get_preferences(self) -> Dict[str, Any]:
        return await self.authenticated_request("GET", "/preferences")

    async def update_preferences(self, preferences: Dict[str, Any]) -> Dict[str, Any]:
        return await self.authenticated_request("POST", "/preferences", json=preferences)


__all__ = [
    "AuthGatewayClient",
    "SwiperApiClient",
    "tokens_from_callback_url",
]
