"""Instagram handle cleaning and validation."""

from __future__ import annotations

import re

MAX_HANDLE_LENGTH = 30

_HANDLE_RE = re.compile(r"[A-Za-z0-9._]+")
_TRAILING_PUNCT_RE = re.compile(r"[,;!?)\]}>.]+$")

EXCLUDED_HANDLES = frozenset(
    {
        "gmail",
        "email",
        "com",
        "net",
        "org",
        "www",
        "http",
        "https",
        "the",
        "and",
        "for",
        "you",
        "link",
        "bio",
        "here",
        "click",
    }
)


def clean_handle(value: str | None) -> str:
    text = (value or "").strip()
    if text.startswith("@"):
        text = text[1:]
    return _TRAILING_PUNCT_RE.sub("", text).strip()


def is_valid_handle(handle: str | None) -> bool:
    if not handle or len(handle) > MAX_HANDLE_LENGTH:
        return False
    if not _HANDLE_RE.fullmatch(handle):
        return False
    return handle.lower() not in EXCLUDED_HANDLES
