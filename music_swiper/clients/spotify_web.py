"""
Spotify Web API client.

The client holds no credentials. Every call takes the caller's access token,
and ``SpotifySession`` binds one token for the lifetime of a single request so
concurrent requests never share a mutable credential.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional

import httpx
from pydantic import ValidationError

from music_swiper.core.config import SpotifySettings

logger = logging.getLogger(__name__)


class SpotifyApiError(Exception):
    """Raised for any failed Web API call, whatever the cause."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@contextmanager
def translate_payload_errors(what: str) -> Iterator[None]:
    """Turn reshaping failures on an unexpected upstream payload into ``SpotifyApiError``."""
    try:
        yield
    except (KeyError, TypeError, AttributeError, ValidationError) as exc:
        raise SpotifyApiError(f"Unexpected {what} payload from Spotify: {exc!r}") from exc


class SpotifyWebClient:
    """Thin async wrapper over the Spotify Web API endpoints the gateway proxies."""

    def __init__(
        self,
        settings: SpotifySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = settings.api_base_url.rstrip("/")
        self._timeout = settings.http_timeout_seconds
        self._transport = transport

    def session(self, access_token: str) -> "SpotifySession":
        """Bind an access token for the duration of one inbound request."""
        return SpotifySession(self, access_token)

    async def request(
        self,
        method: str,
        path: str,
        *,
        access_token: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.HTTPError as exc:
            raise SpotifyApiError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise SpotifyApiError(
                f"{method} {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise SpotifyApiError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise SpotifyApiError(
                f"{method} {path} returned an unexpected payload",
                status_code=response.status_code,
            )
        return payload


class SpotifySession:
    """Request-scoped view of ``SpotifyWebClient`` bound to a single bearer token."""

    def __init__(self, client: SpotifyWebClient, access_token: str) -> None:
        self._client = client
        self._access_token = access_token

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._client.request(
            "GET", path, access_token=self._access_token, params=params
        )

    async def _post(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        return await self._client.request(
            "POST", path, access_token=self._access_token, json=json
        )

    async def get_current_user(self) -> Dict[str, Any]:
        return await self._get("/me")

    async def get_recommendations(
        self,
        *,
        limit: int,
        seed_genres: Iterable[str] = (),
        seed_artists: Iterable[str] = (),
        seed_tracks: Iterable[str] = (),
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": limit}
        for key, seeds in (
            ("seed_genres", seed_genres),
            ("seed_artists", seed_artists),
            ("seed_tracks", seed_tracks),
        ):
            values = [seed for seed in seeds if seed]
            if values:
                params[key] = ",".join(values)
        return await self._get("/recommendations", params=params)

    async def get_user_playlists(self, *, limit: int = 50) -> Dict[str, Any]:
        return await self._get("/me/playlists", params={"limit": limit})

    async def get_playlist(self, playlist_id: str) -> Dict[str, Any]:
        return await self._get(f"/playlists/{playlist_id}")

    async def get_playlist_tracks(self, playlist_id: str) -> Dict[str, Any]:
        return await self._get(f"/playlists/{playlist_id}/tracks")

    async def create_playlist(
        self, name: str, *, description: str = "", public: bool = False
    ) -> Dict[str, Any]:
        logger.info("Creating playlist %r", name)
        return await self._post(
            "/me/playlists",
            {"name": name, "description": description, "public": public},
        )

    async def add_tracks_to_playlist(
        self, playlist_id: str, uris: list[str]
    ) -> Dict[str, Any]:
        return await self._post(f"/playlists/{playlist_id}/tracks", {"uris": uris})


__all__ = [
    "SpotifyApiError",
    "SpotifySession",
    "SpotifyWebClient",
    "translate_payload_errors",
]
