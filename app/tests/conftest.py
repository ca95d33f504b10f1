"""
Shared fixtures: an in-memory SQLite store, an API client wired to it and
bearer tokens for test users.
"""

import os

# Must be set before mixtape.db.session is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mixtape.auth import create_access_token
from mixtape.db.models import Base, Playlist
from mixtape.db.session import get_db
from mixtape.main import app, get_search_client
from mixtape.schemas.tracks import TrackEntry
from mixtape.spotify_client import SpotifyClient


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def TestSession(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(TestSession):
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_spotify():
    sp = Mock()
    sp.search.return_value = {"tracks": {"items": []}}
    return sp


@pytest.fixture
def client(TestSession, fake_spotify):
    def override_get_db():
        session = TestSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_client] = lambda: SpotifyClient(sp=fake_spotify)
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def make_track(song_id: str, **fields) -> Dict:
    data = {
        "songId": song_id,
        "title": f"Song {song_id}",
        "artist": "Some Artist",
        "album": "Some Album",
        "releaseDate": "1999-04-12",
        "durationSeconds": 215,
        "thumbnailUrl": f"https://img.example.com/{song_id}.jpg",
        "explicit": False,
        "previewUrl": f"https://p.example.com/{song_id}.mp3",
    }
    data.update(fields)
    return TrackEntry.model_validate(data).model_dump(by_alias=True)


def seed_playlists(db, owner_id: str, count: int, tracks: Optional[List[Dict]] = None) -> List[Playlist]:
    rows = []
    for i in range(count):
        pl = Playlist(
            owner_id=owner_id,
            title=f"{owner_id} mix {i}",
            tracks=list(tracks) if tracks is not None else [make_track(f"{owner_id}-{i}")],
        )
        db.add(pl)
        rows.append(pl)
    db.commit()
    for pl in rows:
        db.refresh(pl)
    return rows
