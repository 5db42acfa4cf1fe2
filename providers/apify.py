"""Apify actor client: TikTok sound search and profile scraping."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from engine.errors import ConfigurationError, UpstreamError
from engine.types import CandidateSong, SocialProfile
from providers.base import artist_handles_from, as_int, first_url, streaming_ids_from
from providers.http import ProviderHttpClient

logger = logging.getLogger(__name__)

APIFY_API_BASE = os.getenv("APIFY_API_BASE", "https://api.apify.com/v2")
APIFY_TOKEN_PREFIX = "apify_api_"

MUSIC_SEARCH_ACTOR = "axlymxp~tiktok-music-scraper"
PROFILE_ACTOR = "apidojo~tiktok-profile-scraper"

SOUND_SEARCH_SOURCE = "sound-search"


def parse_music_result(item: dict[str, Any]) -> Optional[CandidateSong]:
    song_id = item.get("id_str") or item.get("id")
    if song_id in (None, ""):
        return None
    is_original = item.get("is_original")
    return CandidateSong(
        song_id=str(song_id),
        title=str(item.get("title") or ""),
        author=str(item.get("author") or ""),
        album=item.get("album") or None,
        usage_count=as_int(item.get("user_count")),
        is_original=None if is_original is None else bool(is_original),
        artist_handles=artist_handles_from(item.get("artists")),
        owner_handle=item.get("owner_handle") or None,
        cover_url=first_url(item.get("cover_medium")),
        duration=as_int(item.get("duration")),
        streaming_ids=streaming_ids_from(item.get("tt_to_dsp_song_infos")),
        source=SOUND_SEARCH_SOURCE,
    )


def parse_profile(handle: str, items: list[Any]) -> Optional[SocialProfile]:
    for item in items:
        channel = item.get("channel") if isinstance(item, dict) else None
        if not isinstance(channel, dict):
            continue
        return SocialProfile(
            handle=handle,
            nickname=str(channel.get("name") or handle),
            bio=str(channel.get("bio") or ""),
            bio_link=channel.get("bioLink") or channel.get("bio_link") or None,
            verified=bool(channel.get("verified")),
            followers=as_int(channel.get("followers")),
            likes=as_int(channel.get("likes")),
            video_count=as_int(channel.get("videos")),
            avatar_url=str(channel.get("avatar") or ""),
        )
    return None


class ApifyClient(ProviderHttpClient):
    provider = "apify"
    log_tag = "APIFY"

    def __init__(self, token: str | None, *, base_url: str | None = None, **kwargs: Any) -> None:
        token = (token or "").strip()
        if not token.startswith(APIFY_TOKEN_PREFIX):
            raise ConfigurationError(
                f"Invalid Apify token: it must start with '{APIFY_TOKEN_PREFIX}' "
                "(get one at https://console.apify.com/account#/integrations)"
            )
        super().__init__(**kwargs)
        self.token = token
        self.base_url = (base_url or APIFY_API_BASE).rstrip("/")

    def run_actor(self, actor_id: str, actor_input: dict[str, Any]) -> list[Any]:
        """Run an actor synchronously and return its dataset items."""
        endpoint = f"acts/{actor_id}/run-sync-get-dataset-items"
        payload = self._request_json(
            "POST",
            f"{self.base_url}/{endpoint}",
            endpoint=endpoint,
            params={"token": self.token},
            json=actor_input,
        )
        if not isinstance(payload, list):
            raise UpstreamError(f"Unexpected dataset payload from {actor_id}", provider=self.provider, endpoint=endpoint)
        return payload

    def search(self, query: str, limit: int) -> list[CandidateSong]:
        logger.info(f"[APIFY] sound search query={query!r} limit={limit}")
        items = self.run_actor(MUSIC_SEARCH_ACTOR, {"keyword": query, "max_items": limit})
        candidates = []
        for item in items[:limit]:
            if not isinstance(item, dict):
                continue
            candidate = parse_music_result(item)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def get_profile(self, handle: str) -> Optional[SocialProfile]:
        logger.info(f"[APIFY] profile handle=@{handle}")
        items = self.run_actor(PROFILE_ACTOR, {"usernames": [handle], "maxItems": 1})
        return parse_profile(handle, items)
