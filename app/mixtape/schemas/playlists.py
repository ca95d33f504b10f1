from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from mixtape.schemas.tracks import TrackEntry


class PlaylistCreate(BaseModel):
    """Create a new playlist"""
    title: Optional[str] = None  # required, checked by the service


class PlaylistUpdate(BaseModel):
    """Partial update of a playlist; only set fields are applied"""
    title: Optional[str] = None


class PlaylistOut(BaseModel):
    """Output schema for a playlist"""
    id: str
    title: str
    content: List[TrackEntry] = []
    created: datetime
