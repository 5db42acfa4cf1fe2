from typing import Any, Optional, Protocol, TypedDict

from engine.types import CandidateSong, SocialProfile, SongDetail


class RawArtist(TypedDict, total=False):
    handle: str
    nick_name: str
    uid: str
    sec_uid: str
    is_verified: bool


class RawCover(TypedDict, total=False):
    url_list: Any


class RawMusic(TypedDict, total=False):
    id_str: str
    mid: str
    title: str
    author: str
    album: str
    is_original_sound: bool
    is_pgc: bool
    is_author_artist: bool
    user_count: int
    artists: dict[str, RawArtist]
    owner_handle: str
    cover_medium: RawCover


class RawAwemeInfo(TypedDict, total=False):
    music: RawMusic


class RawVideoItem(TypedDict, total=False):
    aweme_info: RawAwemeInfo


class SoundSearchProvider(Protocol):
    def search(self, query: str, limit: int) -> list[CandidateSong]:
        raise NotImplementedError


class KeywordSearchProvider(Protocol):
    def search(self, query: str) -> list[RawVideoItem]:
        raise NotImplementedError


class SongDetailProvider(Protocol):
    def get_details(self, song_id: str) -> Optional[SongDetail]:
        raise NotImplementedError


class ProfileProvider(Protocol):
    def get_profile(self, handle: str) -> Optional[SocialProfile]:
        raise NotImplementedError


def first_url(cover: Any) -> Optional[str]:
    """Return the first URL of a cover object whose url_list is a list or an index-keyed dict."""
    if not isinstance(cover, dict):
        return None
    urls = cover.get("url_list")
    if isinstance(urls, dict):
        urls = list(urls.values())
    if not isinstance(urls, list):
        return None
    for url in urls:
        if isinstance(url, str) and url.strip():
            return url.strip()
    return None


def as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def values_of(container: Any) -> list:
    """List the items of an array the API may serialize as an index-keyed object."""
    if isinstance(container, dict):
        return list(container.values())
    if isinstance(container, list):
        return container
    return []


def streaming_ids_from(infos: Any) -> list[tuple[int, str]]:
    streaming_ids = []
    for raw in values_of(infos):
        if not isinstance(raw, dict):
            continue
        song_id = raw.get("song_id")
        if song_id in (None, ""):
            continue
        streaming_ids.append((as_int(raw.get("platform")), str(song_id)))
    return streaming_ids


def artist_handles_from(artists: Any) -> list[str]:
    return [
        str(raw.get("handle")).strip()
        for raw in values_of(artists)
        if isinstance(raw, dict) and str(raw.get("handle") or "").strip()
    ]
