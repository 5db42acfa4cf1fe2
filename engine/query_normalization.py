from __future__ import annotations

import unicodedata

from engine.types import Query


def normalize_text(value: str | None) -> str:
    if not value:
        return ""
    # Lowercase first: some uppercase letters lowercase into a base letter plus a combining mark.
    decomposed = unicodedata.normalize("NFD", str(value).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def tokenize(value: str | None) -> list[str]:
    return [token for token in normalize_text(value).split() if len(token) > 1]


def build_query(raw: str | None) -> Query:
    text = (raw or "").strip()
    return Query(raw=text, normalized=normalize_text(text), tokens=tuple(tokenize(text)))
