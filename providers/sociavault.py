"""SociaVault scrape API client: keyword video search and music details."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from engine.errors import ConfigurationError, UpstreamError
from engine.types import OfficialArtist, SongDetail
from providers.base import RawVideoItem, as_int, first_url, streaming_ids_from, values_of
from providers.http import ProviderHttpClient

logger = logging.getLogger(__name__)

SOCIAVAULT_BASE_URL = os.getenv("SOCIAVAULT_BASE_URL", "https://api.sociavault.com/v1/scrape")
SOCIAVAULT_KEY_PREFIX = "sk_live_"

_KEYWORD_SEARCH_ENDPOINT = "tiktok/search/keyword"
_MUSIC_DETAILS_ENDPOINT = "tiktok/music/details"


def parse_song_detail(info: dict[str, Any]) -> SongDetail:
    artists = []
    for raw in values_of(info.get("artists")):
        if not isinstance(raw, dict):
            continue
        handle = str(raw.get("handle") or "").strip()
        if not handle:
            continue
        artists.append(
            OfficialArtist(
                handle=handle,
                nickname=str(raw.get("nick_name") or ""),
                verified=bool(raw.get("is_verified")),
            )
        )

    return SongDetail(
        title=str(info.get("title") or ""),
        author=str(info.get("author") or ""),
        album=info.get("album") or None,
        usage_count=as_int(info.get("user_count")),
        artists=artists,
        owner_handle=(info.get("owner_handle") or None),
        owner_nickname=(info.get("owner_nickname") or None),
        is_original_sound=bool(info.get("is_original_sound")),
        streaming_ids=streaming_ids_from(info.get("tt_to_dsp_song_infos")),
        cover_url=first_url(info.get("cover_medium")),
    )


class SociaVaultClient(ProviderHttpClient):
    provider = "sociavault"
    log_tag = "SOCIAVAULT"

    def __init__(self, api_key: str | None, *, base_url: str | None = None, **kwargs: Any) -> None:
        api_key = (api_key or "").strip()
        if not api_key.startswith(SOCIAVAULT_KEY_PREFIX):
            raise ConfigurationError(
                f"Invalid SociaVault API key: it must start with '{SOCIAVAULT_KEY_PREFIX}' "
                "(get one at https://sociavault.com/dashboard)"
            )
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = (base_url or SOCIAVAULT_BASE_URL).rstrip("/")

    def _get(self, endpoint: str, params: dict[str, str]) -> dict[str, Any]:
        logger.debug("[SOCIAVAULT] GET %s params=%s", endpoint, params)
        payload = self._request_json(
            "GET",
            f"{self.base_url}/{endpoint}",
            endpoint=endpoint,
            params=params,
            headers={"X-API-Key": self.api_key, "Content-Type": "application/json"},
        )
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError(f"Missing data envelope on {endpoint}", provider=self.provider, endpoint=endpoint)
        if data.get("success") is False:
            raise UpstreamError(f"Unsuccessful response on {endpoint}", provider=self.provider, endpoint=endpoint)
        return data

    def search(self, query: str) -> list[RawVideoItem]:
        """Keyword video search. Song ids come back as strings, keeping their full precision."""
        data = self._get(_KEYWORD_SEARCH_ENDPOINT, {"query": query})
        return [item for item in values_of(data.get("search_item_list")) if isinstance(item, dict)]

    def get_details(self, song_id: str) -> Optional[SongDetail]:
        data = self._get(_MUSIC_DETAILS_ENDPOINT, {"clipId": str(song_id)})
        info = data.get("music_info")
        if not isinstance(info, dict):
            return None
        return parse_song_detail(info)
