from __future__ import annotations

from typing import Iterable

from engine.types import ArtistResult


def rank_results(results: Iterable[ArtistResult]) -> list[ArtistResult]:
    """Verified artists first, then by follower count descending; ties keep input order."""
    return sorted(
        results,
        key=lambda result: (
            0 if result.profile.verified else 1,
            -int(result.profile.followers or 0),
        ),
    )
