import logging
import re
from typing import Iterable, Optional

from engine.types import ResolvedSong, SongDetail

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")
_HANDLE_DISALLOWED_RE = re.compile(r"[^a-z0-9._]")
MIN_DERIVED_HANDLE_LENGTH = 2


def derive_handle(author: Optional[str]) -> Optional[str]:
    """Guess a platform handle from an author display name, e.g. "Kendrick Lamar" -> "kendricklamar"."""
    text = _WS_RE.sub("", (author or "").lower())
    text = _HANDLE_DISALLOWED_RE.sub("", text)
    if len(text) < MIN_DERIVED_HANDLE_LENGTH:
        return None
    return text


def _dedupe(handles: Iterable[str]) -> list[str]:
    seen = set()
    out = []
    for handle in handles:
        key = (handle or "").strip().lstrip("@").lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


def resolve_artist_handles(song: ResolvedSong, detail: Optional[SongDetail], *, max_results: int) -> list[str]:
    handles: list[str] = []
    if detail is not None:
        handles = _dedupe(artist.handle for artist in detail.artists)
        for artist in detail.artists:
            logger.info(f"[DETAILS] official artist=@{artist.handle} nickname={artist.nickname!r}")
        if not handles and detail.is_original_sound and detail.owner_handle:
            handles = _dedupe([detail.owner_handle])
            logger.info(f"[DETAILS] original sound owner=@{detail.owner_handle}")

    if not handles:
        author = (detail.author if detail is not None and detail.author else "") or song.author
        guess = derive_handle(author)
        if guess:
            logger.info(f"[DETAILS] fallback handle=@{guess} derived from author={author!r}")
            handles = [guess]

    if not handles:
        logger.info(f"[DETAILS] no artist handles song_id={song.song_id}")
        return []
    return handles[: max(0, int(max_results))]
