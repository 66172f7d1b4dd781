"""
Pydantic models for playlist listing, detail and creation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .tracks import Track


def _first_image_url(entity: Dict[str, Any]) -> Optional[str]:
    images = entity.get("images") or []
    return images[0].get("url") if images else None


class PlaylistSummary(BaseModel):
    """Compact playlist entry shown in the library view."""

    id: str
    name: str
    image_url: Optional[str] = None
    tracks_count: int = 0

    @classmethod
    def from_spotify(cls, playlist: Dict[str, Any]) -> "PlaylistSummary":
        tracks = playlist.get("tracks") or {}
        return cls(
            id=playlist["id"],
            name=playlist["name"],
            image_url=_first_image_url(playlist),
            tracks_count=tracks.get("total", 0),
        )


class PlaylistList(BaseModel):
    playlists: List[PlaylistSummary] = Field(default_factory=list)


class PlaylistDetail(BaseModel):
    """Playlist metadata together with its flattened tracks."""

    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    tracks: List[Track] = Field(default_factory=list)

    @classmethod
    def from_spotify(
        cls, playlist: Dict[str, Any], track_page: Dict[str, Any]
    ) -> "PlaylistDetail":
        # Removed or local items come back with a null track.
        tracks = [
            Track.from_spotify(item["track"])
            for item in track_page.get("items") or []
            if item.get("track") and item["track"].get("id")
        ]
        return cls(
            id=playlist["id"],
            name=playlist["name"],
            description=playlist.get("description"),
            image_url=_first_image_url(playlist),
            tracks=tracks,
        )


class PlaylistCreateRequest(BaseModel):
    """Body accepted by the playlist creation endpoint."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    public: Optional[bool] = None


class CreatedPlaylist(BaseModel):
    """Playlist as returned right after creation."""

    id: str
    name: str
    description: Optional[str] = None
    public: bool = False
    image_url: Optional[str] = None
    tracks_count: int = 0

    @classmethod
    def from_spotify(cls, playlist: Dict[str, Any]) -> "CreatedPlaylist":
        return cls(
            id=playlist["id"],
            name=playlist["name"],
            description=playlist.get("description"),
            public=bool(playlist.get("public")),
            image_url=_first_image_url(playlist),
        )


__all__ = [
    "CreatedPlaylist",
    "PlaylistCreateRequest",
    "PlaylistDetail",
    "PlaylistList",
    "PlaylistSummary",
]
