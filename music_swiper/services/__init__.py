"""Service layer exports."""

from .playlists import PlaylistService
from .preferences import DEFAULT_PREFERENCES, PreferenceService, PreferenceStore
from .tracks import TrackService

__all__ = [
    "DEFAULT_PREFERENCES",
    "PlaylistService",
    "PreferenceService",
    "PreferenceStore",
    "TrackService",
]
