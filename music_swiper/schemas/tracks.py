"""
Pydantic models for track recommendations and swipe actions.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Track(BaseModel):
    """Flattened view of a Spotify track."""

    id: str
    name: str
    artist: str = Field(..., description="Artist names joined with ', '.")
    album: Optional[str] = None
    preview_url: Optional[str] = None
    image_url: Optional[str] = Field(
        None, description="Largest album artwork, when Spotify provides one."
    )

    @classmethod
    def from_spotify(cls, track: Dict[str, Any]) -> "Track":
        album = track.get("album") or {}
        images = album.get("images") or []
        return cls(
            id=track["id"],
            name=track["name"],
            artist=", ".join(
                artist["name"] for artist in track.get("artists") or [] if artist.get("name")
            ),
            album=album.get("name"),
            preview_url=track.get("preview_url"),
            image_url=images[0].get("url") if images else None,
        )


class TrackList(BaseModel):
    """Response wrapper for recommendation batches."""

    tracks: List[Track] = Field(default_factory=list)


class TrackActionRequest(BaseModel):
    """Body of a like or dislike swipe."""

    model_config = ConfigDict(extra="ignore")

    track_id: Optional[str] = Field(None, description="Spotify track identifier.")

    @field_validator("track_id", mode="before")
    @classmethod
    def _coerce_scalar_id(cls, value: Any) -> Any:
        """Accept numeric ids; a falsy value counts as missing."""
        if isinstance(value, (bool, int, float)):
            return str(value) if value else None
        return value


__all__ = ["Track", "TrackActionRequest", "TrackList"]
