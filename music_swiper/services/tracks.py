"""
Recommendation and swipe handling.
"""

from __future__ import annotations

import logging
from typing import Iterable

from music_swiper.clients.spotify_web import SpotifySession, translate_payload_errors
from music_swiper.core.config import PlaylistSettings
from music_swiper.schemas import Track, TrackList

logger = logging.getLogger(__name__)


class TrackService:
    """Fetches recommendation batches and files liked tracks into a playlist."""

    def __init__(self, playlist_settings: PlaylistSettings) -> None:
        self._playlists = playlist_settings

    async def recommendations(
        self,
        session: SpotifySession,
        *,
        limit: int,
        seed_genres: Iterable[str] = (),
        seed_artists: Iterable[str] = (),
        seed_tracks: Iterable[str] = (),
    ) -> TrackList:
        payload = await session.get_recommendations(
            limit=limit,
            seed_genres=seed_genres,
            seed_artists=seed_artists,
            seed_tracks=seed_tracks,
        )
        with translate_payload_errors("recommendations"):
            return TrackList(
                tracks=[Track.from_spotify(track) for track in payload["tracks"] if track]
            )

    async def like(self, session: SpotifySession, track_id: str) -> str:
        """
        Append a track to the liked-tracks playlist, creating it on first use.

        Lookup and creation are not atomic: two concurrent first likes can
        each create the playlist.

        Returns the playlist id the track was added to.
        """
        playlist_id = await self._find_liked_playlist(session)
        if playlist_id is None:
            created = await session.create_playlist(
                self._playlists.liked_playlist_name,
                description=self._playlists.liked_playlist_description,
                public=False,
            )
            with translate_payload_errors("playlist creation"):
                playlist_id = created["id"]
            logger.info("Created liked-tracks playlist %s", playlist_id)

        await session.add_tracks_to_playlist(playlist_id, [f"spotify:track:{track_id}"])
        return playlist_id

    async def _find_liked_playlist(self, session: SpotifySession) -> str | None:
        page = await session.get_user_playlists()
        with translate_payload_errors("playlists"):
            for playlist in page["items"]:
                if playlist and playlist.get("name") == self._playlists.liked_playlist_name:
                    return playlist["id"]
        return None


__all__ = ["TrackService"]
