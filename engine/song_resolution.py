import logging
from typing import Any, Callable, Optional

from engine.errors import ConfigurationError, UpstreamError
from engine.song_matching import score_candidate, select_best_song
from engine.types import CandidateSong, Query, ResolvedSong
from providers.base import KeywordSearchProvider, SoundSearchProvider, artist_handles_from, as_int, first_url

logger = logging.getLogger(__name__)

DEFAULT_SOUND_SEARCH_LIMIT = 10
KEYWORD_SEARCH_SOURCE = "keyword-search"


def candidate_from_video_item(item: Any) -> Optional[CandidateSong]:
    """Lift the song embedded in a keyword-search video item into a candidate."""
    if not isinstance(item, dict):
        return None
    aweme = item.get("aweme_info")
    music = aweme.get("music") if isinstance(aweme, dict) else None
    if not isinstance(music, dict):
        return None
    song_id = music.get("id_str") or music.get("mid")
    if not song_id:
        return None
    is_original = music.get("is_original_sound")
    return CandidateSong(
        song_id=str(song_id),
        title=str(music.get("title") or ""),
        author=str(music.get("author") or ""),
        album=music.get("album") or None,
        usage_count=as_int(music.get("user_count")),
        is_original=None if is_original is None else bool(is_original),
        is_official=bool(music.get("is_pgc")),
        is_author_artist=bool(music.get("is_author_artist")),
        artist_handles=artist_handles_from(music.get("artists")),
        owner_handle=music.get("owner_handle") or None,
        cover_url=first_url(music.get("cover_medium")),
        source=KEYWORD_SEARCH_SOURCE,
    )


class SongResolver:
    """Find the one song a query refers to, trying each search strategy in priority order."""

    def __init__(
        self,
        sound_search: Optional[SoundSearchProvider],
        keyword_search: Optional[KeywordSearchProvider],
        *,
        sound_search_limit: int = DEFAULT_SOUND_SEARCH_LIMIT,
    ) -> None:
        self.sound_search = sound_search
        self.keyword_search = keyword_search
        self.sound_search_limit = sound_search_limit

    def _strategies(self) -> list[tuple[str, Callable[[Query], list[CandidateSong]]]]:
        strategies = []
        if self.sound_search is not None:
            strategies.append(("sound-search", self._search_sounds))
        if self.keyword_search is not None:
            strategies.append(("keyword-search", self._search_videos))
        return strategies

    def _search_sounds(self, query: Query) -> list[CandidateSong]:
        return list(self.sound_search.search(query.raw, self.sound_search_limit))

    def _search_videos(self, query: Query) -> list[CandidateSong]:
        items = self.keyword_search.search(query.raw)
        logger.info(f"[SEARCH] keyword search videos={len(items)}")
        candidates = []
        for item in items:
            candidate = candidate_from_video_item(item)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _run_strategy(self, name, fetch, query: Query) -> Optional[CandidateSong]:
        try:
            candidates = fetch(query)
        except ConfigurationError:
            raise
        except UpstreamError as exc:
            logger.warning(f"[SEARCH] strategy={name} failed provider={exc.provider} error={exc}")
            return None
        except Exception:
            logger.exception(f"[SEARCH] strategy={name} raised")
            return None

        logger.info(f"[SEARCH] strategy={name} candidates={len(candidates)}")
        best = select_best_song(query.tokens, candidates)
        if best is None:
            return None
        score = score_candidate(query.tokens, best)
        logger.info(
            f"[SEARCH] strategy={name} selected title={best.title!r} author={best.author!r} "
            f"song_id={best.song_id} score={score.total}"
        )
        return best

    def resolve(self, query: Query) -> Optional[ResolvedSong]:
        if not query.tokens:
            return None
        for name, fetch in self._strategies():
            best = self._run_strategy(name, fetch, query)
            if best is not None:
                return ResolvedSong.from_candidate(best)
        logger.info(f"[SEARCH] no relevant song query={query.raw!r}")
        return None
