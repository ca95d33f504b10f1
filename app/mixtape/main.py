from __future__ import annotations

import logging
import os
from typing import List

from dotenv import load_dotenv

# Environment must be loaded before the engine is created
load_dotenv()

from fastapi import FastAPI, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from mixtape.auth import get_current_user_id
from mixtape.db.session import get_db
from mixtape.logging_config import setup_logging
from mixtape.schemas.playlists import PlaylistCreate, PlaylistUpdate, PlaylistOut
from mixtape.schemas.tracks import TrackEntry
from mixtape.services import playlist_service
from mixtape.services.playlist_service import (
    PlaylistValidationError,
    PlaylistNotFound,
    PlaylistOperationError,
)
from mixtape.spotify_client import SpotifyClient, TrackSearchError


setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Mixtape API")


def get_search_client() -> SpotifyClient:
    try:
        return SpotifyClient()
    except TrackSearchError as e:
        logger.error(f"Search client unavailable: {e}")
        raise HTTPException(status_code=500, detail="Track search is not available")


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, PlaylistValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, PlaylistNotFound):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/playlist", response_model=List[PlaylistOut])
def list_playlists(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        rows = playlist_service.list_playlists(db, user_id)
    except PlaylistOperationError as e:
        raise _http_error(e)
    return [playlist_service.serialize_playlist(r) for r in rows]


@app.post("/playlist", response_model=PlaylistOut, status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        pl = playlist_service.create_playlist(db, user_id, payload)
    except (PlaylistValidationError, PlaylistOperationError) as e:
        raise _http_error(e)
    return playlist_service.serialize_playlist(pl)


@app.put("/playlist/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_playlist(
    playlist_id: str,
    patch: PlaylistUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        playlist_service.update_playlist(db, user_id, playlist_id, patch)
    except (PlaylistValidationError, PlaylistOperationError) as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete("/playlist/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_playlist(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        playlist_service.delete_playlist(db, user_id, playlist_id)
    except PlaylistOperationError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/playlist/{playlist_id}/tracks", response_model=PlaylistOut)
def playlist_tracks(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Whole playlist, tracks included."""
    try:
        pl = playlist_service.get_playlist(db, user_id, playlist_id)
    except (PlaylistNotFound, PlaylistOperationError) as e:
        raise _http_error(e)
    return playlist_service.serialize_playlist(pl)


@app.get("/track/{title}", response_model=List[TrackEntry])
def search_track(
    title: str,
    user_id: str = Depends(get_current_user_id),
    sp: SpotifyClient = Depends(get_search_client),
):
    try:
        return sp.search_tracks(title)
    except TrackSearchError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/playlist/{playlist_id}/track", status_code=status.HTTP_204_NO_CONTENT)
def add_track(
    playlist_id: str,
    track: TrackEntry,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        playlist_service.add_track(db, user_id, playlist_id, track)
    except PlaylistOperationError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete("/playlist/{playlist_id}/track/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_track(
    playlist_id: str,
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        playlist_service.remove_track(db, user_id, playlist_id, song_id)
    except PlaylistOperationError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
