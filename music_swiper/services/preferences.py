"""
In-memory user preference storage.

Records live for the lifetime of the process only. They are keyed by the
Spotify user id so that a refreshed access token still maps to the same
record.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict

from music_swiper.clients.spotify_web import SpotifySession, translate_payload_errors

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "genres": ["pop", "rock", "indie"],
    "artists": [],
    "tracks": [],
    "audio_features": {
        "min_energy": 0.4,
        "max_energy": 0.9,
        "min_danceability": 0.3,
        "max_danceability": 0.8,
    },
}


class PreferenceStore:
    """Process-local map of user id to an open-ended preference mapping."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}

    def get(self, user_id: str) -> Dict[str, Any]:
        record = self._records.get(user_id)
        if record is None:
            return copy.deepcopy(DEFAULT_PREFERENCES)
        return copy.deepcopy(record)

    def merge(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge ``changes`` over the stored record (not over the defaults)."""
        merged = {**self._records.get(user_id, {}), **copy.deepcopy(changes)}
        self._records[user_id] = merged
        return copy.deepcopy(merged)


class PreferenceService:
    """Resolves the caller's Spotify identity and reads or updates their record."""

    def __init__(self, store: PreferenceStore) -> None:
        self._store = store

    async def _user_id(self, session: SpotifySession) -> str:
        profile = await session.get_current_user()
        with translate_payload_errors("profile"):
            return str(profile["id"])

    async def get_preferences(self, session: SpotifySession) -> Dict[str, Any]:
        return self._store.get(await self._user_id(session))

    async def update_preferences(
        self, session: SpotifySession, changes: Dict[str, Any]
    ) -> Dict[str, Any]:
        user_id = await self._user_id(session)
        logger.debug("Updating preference keys %s", sorted(changes))
        return self._store.merge(user_id, changes)


__all__ = ["DEFAULT_PREFERENCES", "PreferenceService", "PreferenceStore"]
