from pydantic import BaseModel, Field
from typing import Optional


class TrackEntry(BaseModel):
    """A track embedded in a playlist (camelCase on the wire)"""
    song_id: str = Field(alias="songId", min_length=1)
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    release_date: Optional[str] = Field(default=None, alias="releaseDate")
    duration_seconds: Optional[int] = Field(default=None, alias="durationSeconds")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    explicit: bool = False
    preview_url: Optional[str] = Field(default=None, alias="previewUrl")

    class Config:
        populate_by_name = True
