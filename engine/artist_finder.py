"""Resolve a free-text song query into the TikTok artists behind it.

Flow:
1. Find the song: sound search first, keyword video search as fallback.
2. Fetch song details for official artist handles and streaming links.
3. Fetch each artist's TikTok profile (bounded thread pool).
4. Extract each artist's Instagram identity from the profile bio.
5. Rank: verified first, then by followers.

Song details, single profiles and raw sound listings are also exposed on
their own.

Provider failures degrade to partial or empty results; only configuration
errors are raised.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional

from config.settings import DEFAULT_MAX_RESULTS, DEFAULT_MAX_WORKERS, Settings
from engine.artist_resolution import resolve_artist_handles
from engine.errors import ConfigurationError, UpstreamError
from engine.query_normalization import build_query
from engine.ranking import rank_results
from engine.song_resolution import DEFAULT_SOUND_SEARCH_LIMIT, SongResolver
from engine.streaming_links import extract_streaming_links
from engine.types import (
    ArtistResult,
    ProfileResult,
    ResolvedSong,
    SocialProfile,
    SongDetail,
    SoundResult,
    StreamingLinks,
)
from providers.apify import ApifyClient
from providers.base import KeywordSearchProvider, ProfileProvider, SongDetailProvider, SoundSearchProvider
from providers.sociavault import SociaVaultClient
from social.handles import clean_handle
from social.identity import extract_secondary_identity

logger = logging.getLogger(__name__)


def _merge_detail(song: ResolvedSong, detail: Optional[SongDetail]) -> ResolvedSong:
    if detail is None:
        return song
    return replace(
        song,
        title=detail.title or song.title,
        author=detail.author or song.author,
        album=detail.album or song.album,
        usage_count=detail.usage_count or song.usage_count,
        cover_url=detail.cover_url or song.cover_url,
    )


class ArtistFinder:
    def __init__(
        self,
        sound_search: Optional[SoundSearchProvider],
        keyword_search: Optional[KeywordSearchProvider],
        song_details: SongDetailProvider,
        profiles: ProfileProvider,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        sound_search_limit: int = DEFAULT_SOUND_SEARCH_LIMIT,
    ) -> None:
        self.sound_search = sound_search
        self.song_resolver = SongResolver(sound_search, keyword_search, sound_search_limit=sound_search_limit)
        self.song_details = song_details
        self.profiles = profiles
        self.max_workers = max(1, int(max_workers))

    def get_song_details(self, song_id: str) -> Optional[SongDetail]:
        try:
            return self.song_details.get_details(song_id)
        except ConfigurationError:
            raise
        except UpstreamError as exc:
            logger.warning(f"[DETAILS] song_id={song_id} failed error={exc}")
            return None
        except Exception:
            logger.exception(f"[DETAILS] song_id={song_id} raised")
            return None

    def get_profile(self, handle: str) -> Optional[ProfileResult]:
        """Look up one TikTok profile by handle and read its Instagram identity from the bio."""
        handle = clean_handle(handle)
        if not handle:
            return None
        try:
            profile = self.profiles.get_profile(handle)
        except ConfigurationError:
            raise
        except UpstreamError as exc:
            logger.warning(f"[PROFILE] @{handle} failed error={exc}")
            return None
        except Exception:
            logger.exception(f"[PROFILE] @{handle} raised")
            return None
        if profile is None:
            logger.info(f"[PROFILE] @{handle} not found")
            return None
        return ProfileResult(profile=profile, identity=extract_secondary_identity(profile.bio, profile.bio_link))

    def search_sounds(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[SoundResult]:
        """List the top sound search hits in provider order, without scoring."""
        query = (query or "").strip()
        if not query or self.sound_search is None:
            return []
        try:
            candidates = self.sound_search.search(query, max_results)
        except ConfigurationError:
            raise
        except UpstreamError as exc:
            logger.warning(f"[SOUNDS] query={query!r} failed error={exc}")
            return []
        except Exception:
            logger.exception(f"[SOUNDS] query={query!r} raised")
            return []
        logger.info(f"[SOUNDS] query={query!r} sounds={len(candidates)}")
        return [
            SoundResult(
                song=ResolvedSong.from_candidate(candidate),
                duration=candidate.duration,
                is_original=candidate.is_original,
                artist_handles=list(candidate.artist_handles),
                streaming=extract_streaming_links(candidate.streaming_ids),
            )
            for candidate in candidates[:max_results]
        ]

    def close(self) -> None:
        closed = set()
        for provider in (self.sound_search, self.song_resolver.keyword_search, self.song_details, self.profiles):
            close = getattr(provider, "close", None)
            if close is None or id(provider) in closed:
                continue
            closed.add(id(provider))
            close()

    def _enrich(self, handle: str, song: ResolvedSong, streaming: StreamingLinks) -> Optional[ArtistResult]:
        try:
            profile = self.profiles.get_profile(handle)
        except ConfigurationError:
            raise
        except UpstreamError as exc:
            logger.warning(f"[PROFILE] @{handle} failed error={exc}")
            return None
        except Exception:
            logger.exception(f"[PROFILE] @{handle} raised")
            return None

        if profile is None:
            logger.info(f"[PROFILE] @{handle} not found, using placeholder")
            profile = SocialProfile.placeholder(handle)
        else:
            logger.info(
                f"[PROFILE] @{handle} nickname={profile.nickname!r} followers={profile.followers} "
                f"verified={profile.verified}"
            )

        identity = extract_secondary_identity(profile.bio, profile.bio_link)
        if identity.handle:
            logger.info(
                f"[PROFILE] @{handle} instagram=@{identity.handle} source={identity.source.value} "
                f"confidence={identity.confidence.value}"
            )
        return ArtistResult(profile=profile, song=song, identity=identity, streaming=streaming)

    def resolve_artists(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[ArtistResult]:
        parsed = build_query(query)
        logger.info(f"[SEARCH] query={parsed.raw!r} tokens={list(parsed.tokens)}")
        if not parsed.tokens:
            return []

        song = self.song_resolver.resolve(parsed)
        if song is None:
            return []

        detail = self.get_song_details(song.song_id)
        song = _merge_detail(song, detail)
        streaming = extract_streaming_links(detail.streaming_ids if detail else None)

        handles = resolve_artist_handles(song, detail, max_results=max_results)
        if not handles:
            return []

        workers = min(self.max_workers, len(handles))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            enriched = list(pool.map(lambda handle: self._enrich(handle, song, streaming), handles))

        results = rank_results(result for result in enriched if result is not None)
        logger.info(f"[SEARCH] artists={len(results)} query={parsed.raw!r}")
        return results

    def find_artist(self, query: str) -> Optional[ArtistResult]:
        results = self.resolve_artists(query, DEFAULT_MAX_RESULTS)
        return results[0] if results else None


def build_artist_finder(settings: Optional[Settings] = None) -> ArtistFinder:
    """Wire the SociaVault and Apify clients from settings.

    Raises ConfigurationError for missing or malformed credentials, before any
    request is made.
    """
    settings = (settings or Settings.from_env()).validate()
    client_kwargs = {
        "timeout_seconds": settings.timeout_seconds,
        "min_interval_seconds": settings.min_interval_seconds,
    }
    sociavault = SociaVaultClient(settings.sociavault_api_key, **client_kwargs)
    apify = ApifyClient(settings.apify_api_token, **client_kwargs)
    return ArtistFinder(
        sound_search=apify,
        keyword_search=sociavault,
        song_details=sociavault,
        profiles=apify,
        max_workers=settings.max_workers,
        sound_search_limit=settings.sound_search_limit,
    )
