"""Expose dependency helpers for FastAPI routers."""

from .auth import require_access_token
from .clients import (
    get_playlist_service,
    get_preference_service,
    get_preference_store,
    get_spotify_oauth_client,
    get_spotify_session,
    get_spotify_web_client,
    get_track_service,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_playlist_service",
    "get_preference_service",
    "get_preference_store",
    "get_spotify_oauth_client",
    "get_spotify_session",
    "get_spotify_web_client",
    "get_track_service",
    "require_access_token",
]
