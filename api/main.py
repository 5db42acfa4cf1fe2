"""HTTP surface for the artist finder."""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from config.settings import DEFAULT_MAX_RESULTS, clamp_max_results
from engine.artist_finder import ArtistFinder, build_artist_finder
from engine.errors import ConfigurationError
from engine.streaming_links import extract_streaming_links

logger = logging.getLogger(__name__)

# One finder (and one HTTP session per provider) for the life of the process.
# A configuration error is not cached, so fixed credentials take effect on the next request.
_finder: Optional[ArtistFinder] = None
_finder_lock = threading.Lock()


def get_artist_finder() -> ArtistFinder:
    global _finder
    with _finder_lock:
        if _finder is None:
            _finder = build_artist_finder()
        return _finder


def _close_finder() -> None:
    global _finder
    with _finder_lock:
        if _finder is not None:
            _finder.close()
            _finder = None


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    _close_finder()


app = FastAPI(title="artist-finder", lifespan=_lifespan)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _finder_or_error(action: str):
    try:
        return get_artist_finder(), None
    except ConfigurationError as exc:
        logger.error("%s misconfigured: %s", action, exc)
        return None, _error(str(exc), 500)


@app.get("/api/search")
def search_artists(
    q: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
):
    query = (q or "").strip()
    if not query:
        return _error("Query parameter 'q' is required", 400)

    finder, error = _finder_or_error("Artist search")
    if error is not None:
        return error

    results = finder.resolve_artists(query, clamp_max_results(limit, DEFAULT_MAX_RESULTS))
    if not results:
        return _error("No results found", 404)
    return [result.to_dict() for result in results]


@app.get("/api/songs/{song_id}")
def get_song(song_id: str):
    finder, error = _finder_or_error("Song lookup")
    if error is not None:
        return error

    detail = finder.get_song_details(song_id)
    if detail is None:
        return _error(f"No details found for song id {song_id!r}", 404)
    payload = asdict(detail)
    payload["song_id"] = song_id
    payload["streaming"] = asdict(extract_streaming_links(detail.streaming_ids))
    return payload


@app.get("/api/profiles/{handle}")
def get_profile(handle: str):
    finder, error = _finder_or_error("Profile lookup")
    if error is not None:
        return error

    result = finder.get_profile(handle)
    if result is None:
        return _error(f"Profile @{handle.lstrip('@')} not found", 404)
    return result.to_dict()


@app.get("/api/sounds")
def search_sounds(
    q: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
):
    query = (q or "").strip()
    if not query:
        return _error("Query parameter 'q' is required", 400)

    finder, error = _finder_or_error("Sound search")
    if error is not None:
        return error

    sounds = finder.search_sounds(query, clamp_max_results(limit, DEFAULT_MAX_RESULTS))
    if not sounds:
        return _error(f"No sounds found for {query!r}", 404)
    return [sound.to_dict() for sound in sounds]
