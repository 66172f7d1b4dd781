"""Public schema exports."""

from .auth import RefreshTokenResponse
from .common import ActionResult
from .playlists import (
    CreatedPlaylist,
    PlaylistCreateRequest,
    PlaylistDetail,
    PlaylistList,
    PlaylistSummary,
)
from .tracks import Track, TrackActionRequest, TrackList

__all__ = [
    "ActionResult",
    "CreatedPlaylist",
    "PlaylistCreateRequest",
    "PlaylistDetail",
    "PlaylistList",
    "PlaylistSummary",
    "RefreshTokenResponse",
    "Track",
    "TrackActionRequest",
    "TrackList",
]
