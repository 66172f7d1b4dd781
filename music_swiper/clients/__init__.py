"""Expose constructed client wrappers."""

from .spotify_auth import OAuthTokenExchangeError, SpotifyOAuthClient, generate_state_nonce
from .spotify_web import SpotifyApiError, SpotifySession, SpotifyWebClient

__all__ = [
    "OAuthTokenExchangeError",
    "SpotifyApiError",
    "SpotifyOAuthClient",
    "SpotifySession",
    "SpotifyWebClient",
    "generate_state_nonce",
]
