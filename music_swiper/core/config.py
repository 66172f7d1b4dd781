"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI gateway, the server entrypoint
and the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class SpotifySettings(BaseSettings):
    """Configuration required for talking to the Spotify accounts and Web API."""

    client_id: str = Field(..., validation_alias="SPOTIFY_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="SPOTIFY_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., validation_alias="SPOTIFY_REDIRECT_URI")
    accounts_base_url: str = Field(
        "https://accounts.spotify.com",
        validation_alias="SPOTIFY_ACCOUNTS_URL",
        description="Base URL hosting the authorize and token endpoints.",
    )
    api_base_url: str = Field(
        "https://api.spotify.com/v1",
        validation_alias="SPOTIFY_API_URL",
        description="Base URL of the Spotify Web API.",
    )
    http_timeout_seconds: float = Field(10.0, validation_alias="SPOTIFY_HTTP_TIMEOUT")


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    state_cookie_name: str = Field(
        "spotify_auth_state", validation_alias="OAUTH_STATE_COOKIE"
    )
    state_length: int = Field(16, validation_alias="OAUTH_STATE_LENGTH")
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        (
            "user-read-private",
            "user-read-email",
            "user-top-read",
            "playlist-modify-public",
            "playlist-modify-private",
            "playlist-read-private",
            "user-library-modify",
            "user-library-read",
            "streaming",
            "user-read-playback-state",
        ),
        validation_alias="OAUTH_SCOPES",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope.strip() for scope in value.split(",") if scope.strip())


class PlaylistSettings(BaseSettings):
    """Naming for the playlist that collects liked tracks."""

    liked_playlist_name: str = Field(
        "Music Swiper Likes", validation_alias="LIKED_PLAYLIST_NAME"
    )
    liked_playlist_description: str = Field(
        "Tracks you liked on Music Swiper",
        validation_alias="LIKED_PLAYLIST_DESCRIPTION",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    frontend_uri: str = Field(
        "http://localhost:5173",
        validation_alias="FRONTEND_URI",
        description="Origin of the front-end; used for CORS and OAuth redirects.",
    )
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8888, validation_alias="PORT")
    api_base_path: str = Field("/api", validation_alias="API_BASE_PATH")
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    playlists: PlaylistSettings = Field(default_factory=PlaylistSettings)

    @field_validator("frontend_uri")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "OAuthSettings",
    "PlaylistSettings",
    "SpotifySettings",
    "get_settings",
]
