from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Dict, Any

from sqlalchemy import String, Text, Integer, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_playlist_id() -> str:
    return uuid.uuid4().hex


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
TrackList = JSON().with_variant(JSONB(), "postgresql")

TITLE_MAX_LENGTH = 200


# ---------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------

class Playlist(Base):
    __tablename__ = "playlists"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_playlist_id)
    owner_id: Mapped[str] = mapped_column(Text, index=True)  # token `sub`, unbounded

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH))

    # Embedded track entries, in playlist order. Always reassigned, never mutated in place.
    tracks: Mapped[List[Dict[str, Any]]] = mapped_column(TrackList, default=list)

    # Bumped on every ORM flush; a concurrent tracks rewrite fails with StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}
