"""Playlist listing, detail and creation passthroughs."""

from __future__ import annotations

from music_swiper.clients.spotify_web import SpotifySession, translate_payload_errors
from music_swiper.schemas import (
    CreatedPlaylist,
    PlaylistDetail,
    PlaylistList,
    PlaylistSummary,
)


class PlaylistService:
    async def list_playlists(self, session: SpotifySession) -> PlaylistList:
        page = await session.get_user_playlists()
        with translate_payload_errors("playlists"):
            return PlaylistList(
                playlists=[
                    PlaylistSummary.from_spotify(item) for item in page["items"] if item
                ]
            )

    async def get_playlist(
        self, session: SpotifySession, playlist_id: str
    ) -> PlaylistDetail:
        metadata = await session.get_playlist(playlist_id)
        track_page = await session.get_playlist_tracks(playlist_id)
        with translate_payload_errors("playlist"):
            return PlaylistDetail.from_spotify(metadata, track_page)

    async def create_playlist(
        self,
        session: SpotifySession,
        *,
        name: str,
        description: str | None = None,
        public: bool | None = None,
    ) -> CreatedPlaylist:
        created = await session.create_playlist(
            name,
            description=description or "",
            public=public if public is not None else False,
        )
        with translate_payload_errors("playlist creation"):
            return CreatedPlaylist.from_spotify(created)


__all__ = ["PlaylistService"]
