import logging
import os
from typing import List, Dict, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

logger = logging.getLogger(__name__)


class TrackSearchError(RuntimeError):
    """The search provider could not be reached or rejected the query"""


def _auth_manager() -> SpotifyClientCredentials:
    client_id = os.getenv("SPOTIFY_CLIENT_ID")
    client_secret = os.getenv("SPOTIFY_CLIENT_SECRET")

    if not client_id or not client_secret:
        raise TrackSearchError(
            "Spotify credentials not set (SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET)"
        )

    return SpotifyClientCredentials(client_id=client_id, client_secret=client_secret)


def _search_limit() -> int:
    return int(os.getenv("SPOTIFY_SEARCH_LIMIT", "10"))


def track_to_entry(track: Dict) -> Dict:
    """Map a Spotify track object onto the playlist track-entry shape."""
    artists = track.get("artists") or []
    album = track.get("album") or {}
    images = album.get("images") or []
    duration_ms = track.get("duration_ms")

    return {
        "songId": track["id"],
        "title": track.get("name"),
        "artist": artists[0]["name"] if artists else None,
        "album": album.get("name"),
        "releaseDate": album.get("release_date"),
        "durationSeconds": duration_ms // 1000 if duration_ms is not None else None,
        "thumbnailUrl": images[0]["url"] if images else None,
        "explicit": bool(track.get("explicit", False)),
        "previewUrl": track.get("preview_url"),
    }


class SpotifyClient:
    def __init__(self, sp: Optional[spotipy.Spotify] = None) -> None:
        self.sp = sp or spotipy.Spotify(auth_manager=_auth_manager())

    def search_tracks(self, title: str, limit: Optional[int] = None) -> List[Dict]:
        try:
            res = self.sp.search(q=title, type="track", limit=limit or _search_limit())
        except (SpotifyException, SpotifyOauthError, requests.exceptions.RequestException) as e:
            logger.exception(f"Spotify search failed for {title!r}")
            raise TrackSearchError("Track search failed") from e

        items = res.get("tracks", {}).get("items", [])
        logger.info(f"Spotify search {title!r} returned {len(items)} tracks")
        return [track_to_entry(t) for t in items if t and t.get("id")]
