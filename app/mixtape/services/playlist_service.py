"""
Playlist service.

Operations on the playlist aggregate and its embedded track entries:
- list / create / partial update / delete playlists
- append and remove track entries inside a playlist

Every operation is scoped to the calling user (owner_id). Writes against an
id that matches nothing are a successful no-op; reads raise PlaylistNotFound.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from mixtape.db.models import Playlist, TITLE_MAX_LENGTH
from mixtape.schemas.playlists import PlaylistCreate, PlaylistUpdate, PlaylistOut
from mixtape.schemas.tracks import TrackEntry

logger = logging.getLogger(__name__)

# Top-level fields the update path is allowed to write
UPDATABLE_FIELDS = ("title",)

# Retries of a tracks rewrite that lost a race with another writer
TRACK_WRITE_ATTEMPTS = 3


class PlaylistError(Exception):
    """Base class for playlist service errors"""


class PlaylistValidationError(PlaylistError, ValueError):
    """Request payload is missing or has an invalid field"""


class PlaylistNotFound(PlaylistError):
    """No playlist with that id for this user"""


class PlaylistOperationError(PlaylistError):
    """The store failed; message is safe to show to callers"""


@contextmanager
def _store_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Store failure while trying to {action}")
        raise PlaylistOperationError(f"Failed to {action}") from e


def _scoped(db: Session, user_id: str, playlist_id: str):
    return db.query(Playlist).filter(
        Playlist.id == playlist_id,
        Playlist.owner_id == user_id,
    )


def _require_title(title: Any) -> str:
    if title is None:
        raise PlaylistValidationError("Missing `title` in request body")
    if not isinstance(title, str) or not title.strip():
        raise PlaylistValidationError("`title` must be a non-empty string")
    if len(title) > TITLE_MAX_LENGTH:
        raise PlaylistValidationError(f"`title` must be at most {TITLE_MAX_LENGTH} characters")
    return title


def serialize_playlist(playlist: Playlist) -> PlaylistOut:
    """External form of a playlist: id, title, content (tracks), created."""
    return PlaylistOut(
        id=playlist.id,
        title=playlist.title,
        content=[TrackEntry.model_validate(t) for t in (playlist.tracks or [])],
        created=playlist.created_at,
    )


def list_playlists(db: Session, user_id: str) -> List[Playlist]:
    with _store_errors(db, "list playlists"):
        return db.query(Playlist).filter(Playlist.owner_id == user_id).all()


def create_playlist(db: Session, user_id: str, payload: PlaylistCreate) -> Playlist:
    """
    Create an empty playlist owned by user_id.

    The title is validated before the store is touched.

    Raises:
        PlaylistValidationError: title missing, blank or too long
        PlaylistOperationError: insert failed
    """
    title = _require_title(payload.title)

    pl = Playlist(owner_id=user_id, title=title, tracks=[])
    with _store_errors(db, "create playlist"):
        db.add(pl)
        db.commit()
        db.refresh(pl)

    logger.info(f"Created playlist {pl.id} for user {user_id}")
    return pl


def update_playlist(db: Session, user_id: str, playlist_id: str, patch: PlaylistUpdate) -> bool:
    """
    Apply the whitelisted fields present in patch to a playlist.

    Fields absent from the patch are left untouched. No existence check is
    made first; an unknown id is a no-op.

    Returns:
        True if a playlist matched, False otherwise
    """
    data = patch.model_dump(exclude_unset=True)
    values: Dict[str, Any] = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}

    if "title" in values:
        _require_title(values["title"])

    if not values:
        logger.info(f"Empty update for playlist {playlist_id}, nothing to do")
        return False

    with _store_errors(db, "update playlist"):
        matched = _scoped(db, user_id, playlist_id).update(values, synchronize_session=False)
        db.commit()

    if matched:
        logger.info(f"Updated playlist {playlist_id}: {sorted(values)}")
    else:
        logger.info(f"Update matched no playlist {playlist_id} for user {user_id}")
    return bool(matched)


def delete_playlist(db: Session, user_id: str, playlist_id: str) -> bool:
    """Delete a playlist with its tracks. An unknown id is a no-op."""
    with _store_errors(db, "delete playlist"):
        deleted = _scoped(db, user_id, playlist_id).delete(synchronize_session=False)
        db.commit()

    if deleted:
        logger.info(f"Deleted playlist {playlist_id}")
    else:
        logger.info(f"Delete matched no playlist {playlist_id} for user {user_id}")
    return bool(deleted)


def get_playlist(db: Session, user_id: str, playlist_id: str) -> Playlist:
    with _store_errors(db, "fetch playlist"):
        pl = _scoped(db, user_id, playlist_id).first()

    if pl is None:
        raise PlaylistNotFound(f"Unknown playlist: {playlist_id}")
    return pl


def _rewrite_tracks(
    db: Session,
    user_id: str,
    playlist_id: str,
    action: str,
    change: Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]],
) -> Optional[Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]]:
    """
    Read-modify-write of a playlist's tracks under a row lock.

    The version column turns a lost update into StaleDataError (backends
    without FOR UPDATE, e.g. SQLite); the rewrite is then retried on fresh
    data. Returns (before, after), or None if no playlist matched.
    """
    for attempt in range(1, TRACK_WRITE_ATTEMPTS + 1):
        with _store_errors(db, action):
            try:
                pl = _scoped(db, user_id, playlist_id).with_for_update().first()
                if pl is None:
                    db.rollback()
                    return None

                before = list(pl.tracks or [])
                after = change(before)
                pl.tracks = after
                db.commit()
                return before, after
            except StaleDataError:
                db.rollback()
                logger.warning(
                    f"Playlist {playlist_id} changed during {action}, retrying ({attempt}/{TRACK_WRITE_ATTEMPTS})"
                )

    logger.error(f"Gave up trying to {action} on playlist {playlist_id} after {TRACK_WRITE_ATTEMPTS} attempts")
    raise PlaylistOperationError(f"Failed to {action}")


def add_track(db: Session, user_id: str, playlist_id: str, track: TrackEntry) -> bool:
    """
    Append a track entry at the end of the playlist.

    Returns:
        True if a playlist matched, False otherwise
    """
    entry = track.model_dump(by_alias=True)

    result = _rewrite_tracks(db, user_id, playlist_id, "add track", lambda tracks: tracks + [entry])
    if result is None:
        logger.info(f"Add track matched no playlist {playlist_id} for user {user_id}")
        return False

    logger.info(f"Added track {track.song_id} to playlist {playlist_id}")
    return True


def remove_track(db: Session, user_id: str, playlist_id: str, song_id: str) -> bool:
    """
    Remove every entry with the given songId; other entries keep their order.

    Returns:
        True if a playlist matched, False otherwise
    """
    result = _rewrite_tracks(
        db, user_id, playlist_id, "remove track",
        lambda tracks: [t for t in tracks if t.get("songId") != song_id],
    )
    if result is None:
        logger.info(f"Remove track matched no playlist {playlist_id} for user {user_id}")
        return False

    before, after = result
    logger.info(
        f"Removed {len(before) - len(after)} entries of track {song_id} from playlist {playlist_id}"
    )
    return True
