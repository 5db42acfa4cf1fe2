from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from engine.query_normalization import normalize_text
from engine.types import CandidateSong

SIGNAL_WEIGHTS = {
    "title_token": 3,
    "author_token": 3,
    "album_token": 1,
    "cross_field": 10,
    "usage_over_1k": 2,
    "usage_over_100k": 3,
    "official_song": 5,
    "author_is_artist": 3,
    "has_official_artists": 3,
    "not_original_sound": 3,
    "original_sound_title": -10,
}

_USAGE_TIERS = (
    ("usage_over_1k", 1_000),
    ("usage_over_100k", 100_000),
)

_ORIGINAL_SOUND_PHRASE = "original sound"


@dataclass
class SongScore:
    total: int = 0
    signals: list[str] = field(default_factory=list)
    title_matches: int = 0
    author_matches: int = 0
    album_matches: int = 0

    @property
    def has_token_match(self) -> bool:
        return bool(self.title_matches or self.author_matches or self.album_matches)

    def add(self, signal: str) -> None:
        self.total += SIGNAL_WEIGHTS[signal]
        self.signals.append(signal)


def score_candidate(tokens: Sequence[str], candidate: CandidateSong) -> SongScore:
    score = SongScore()
    title = normalize_text(candidate.title)
    author = normalize_text(candidate.author)
    album = normalize_text(candidate.album)

    for token in tokens:
        if token in title:
            score.add("title_token")
            score.title_matches += 1
        if token in author:
            score.add("author_token")
            score.author_matches += 1
        if album and token in album:
            score.add("album_token")
            score.album_matches += 1

    if score.title_matches and score.author_matches:
        score.add("cross_field")

    usage = candidate.usage_count or 0
    for signal, threshold in _USAGE_TIERS:
        if usage > threshold:
            score.add(signal)

    if candidate.is_official:
        score.add("official_song")
    if candidate.is_author_artist:
        score.add("author_is_artist")
    if candidate.artist_handles:
        score.add("has_official_artists")
    if candidate.is_original is False:
        score.add("not_original_sound")
    if _ORIGINAL_SOUND_PHRASE in title:
        score.add("original_sound_title")
    return score


def rank_songs(tokens: Sequence[str], candidates: Iterable[CandidateSong]) -> list[tuple[CandidateSong, SongScore]]:
    """Score candidates and order them best first, dropping those with no token match.

    sorted() is stable, so candidates with equal totals keep input order.
    """
    scored = [(candidate, score_candidate(tokens, candidate)) for candidate in candidates]
    eligible = [pair for pair in scored if pair[1].has_token_match]
    return sorted(eligible, key=lambda pair: -pair[1].total)


def select_best_song(tokens: Sequence[str], candidates: Iterable[CandidateSong]) -> Optional[CandidateSong]:
    # No score floor: a relevant candidate with a negative total still wins when nothing beats it.
    ranked = rank_songs(tokens, candidates)
    if not ranked:
        return None
    return ranked[0][0]
