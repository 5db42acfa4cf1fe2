from __future__ import annotations

import pytest

from engine.query_normalization import build_query, normalize_text, tokenize


def test_normalize_text_strips_diacritics_and_lowercases() -> None:
    assert normalize_text("Rosalía MALAMENTE") == "rosalia malamente"
    assert normalize_text("Beyoncé") == "beyonce"


def test_normalize_text_handles_empty_values() -> None:
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


@pytest.mark.parametrize(
    "value",
    ["Kendrick Lamar luther", "Ñandú Ções", "İstanbul", "ÅNGSTRÖM  tabs\tand  spaces", "📸 emoji", "ﬁ ligature"],
)
def test_normalize_text_is_idempotent(value: str) -> None:
    once = normalize_text(value)
    assert normalize_text(once) == once


def test_tokenize_drops_single_character_tokens() -> None:
    assert tokenize("A Tribe Called Quest x Y") == ["tribe", "called", "quest"]


def test_build_query_keeps_raw_text_and_tokens() -> None:
    query = build_query("  Bad Bunny Mónaco  ")
    assert query.raw == "Bad Bunny Mónaco"
    assert query.normalized == "bad bunny monaco"
    assert query.tokens == ("bad", "bunny", "monaco")


def test_build_query_is_immutable() -> None:
    query = build_query("luther")
    with pytest.raises(AttributeError):
        query.raw = "other"  # type: ignore[misc]
