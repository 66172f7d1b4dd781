"""
Factory functions to provide shared clients and services as FastAPI dependencies.

The shared objects hold configuration only; credentials arrive with each
request and are bound through ``get_spotify_session``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from music_swiper.clients import SpotifyOAuthClient, SpotifySession, SpotifyWebClient
from music_swiper.core.config import get_settings
from music_swiper.dependencies.auth import require_access_token
from music_swiper.services import (
    PlaylistService,
    PreferenceService,
    PreferenceStore,
    TrackService,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_spotify_oauth_client() -> SpotifyOAuthClient:
    """Create a singleton Spotify OAuth client."""
    settings = _settings()
    return SpotifyOAuthClient(settings.spotify, settings.oauth)


@lru_cache()
def get_spotify_web_client() -> SpotifyWebClient:
    """Provide the stateless Spotify Web API client."""
    return SpotifyWebClient(_settings().spotify)


def get_spotify_session(
    access_token: Annotated[str, Depends(require_access_token)],
    client: Annotated[SpotifyWebClient, Depends(get_spotify_web_client)],
) -> SpotifySession:
    """Bind the caller's bearer token to a session used only by this request."""
    return client.session(access_token)


def get_track_service() -> TrackService:
    return TrackService(_settings().playlists)


def get_playlist_service() -> PlaylistService:
    return PlaylistService()


@lru_cache()
def get_preference_store() -> PreferenceStore:
    """Provide the process-local preference store."""
    return PreferenceStore()


def get_preference_service() -> PreferenceService:
    return PreferenceService(get_preference_store())


__all__ = [
    "get_playlist_service",
    "get_preference_service",
    "get_preference_store",
    "get_spotify_oauth_client",
    "get_spotify_session",
    "get_spotify_web_client",
    "get_track_service",
]
