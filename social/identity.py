"""Extract an artist's Instagram identity from their TikTok bio and bio link.

Strategies run in priority order and the first one that produces an identity
wins:

1. bio link pointing straight at Instagram (high confidence)
2. explicit declarations in the bio text, e.g. ``IG: @name`` (high)
3. bio link pointing at a link aggregator such as Linktree (medium, no handle)
4. a single unambiguous ``@mention`` in the bio (low)
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

from engine.types import Confidence, IdentitySource, SecondaryIdentity
from social.handles import clean_handle, is_valid_handle

IdentityStrategy = Callable[[str, Optional[str]], Optional[SecondaryIdentity]]

PRIMARY_PLATFORM_NAME = "tiktok"

_HANDLE = r"([A-Za-z0-9._]+)"
_IG_WORD = r"(?:ig|insta|instagram)"

_DIRECT_LINK_PATTERNS = (
    re.compile(r"(?:https?://)?(?:www\.)?instagram\.com/" + _HANDLE + r"/?(?:\?.*)?", re.IGNORECASE),
    re.compile(r"(?:https?://)?(?:www\.)?instagr\.am/" + _HANDLE + r"/?(?:\?.*)?", re.IGNORECASE),
)

_EXPLICIT_BIO_PATTERNS = (
    # "IG: @name", "insta=name", "Instagram@name"
    re.compile(r"\b" + _IG_WORD + r"\s*[:=@]\s*@?" + _HANDLE, re.IGNORECASE),
    re.compile(r"instagram\.com/" + _HANDLE, re.IGNORECASE),
    # "mi ig es @name", "ig @name"
    re.compile(r"(?:\bmi\s+)?\b(?:ig|insta)\s+(?:es\s+)?@" + _HANDLE, re.IGNORECASE),
    # "IG - @name", "IG | name"
    re.compile(r"\b" + _IG_WORD + r"\s*[-|/\\]\s*@?" + _HANDLE, re.IGNORECASE),
    re.compile("\U0001F4F8" + r"\s*@?" + _HANDLE),
    re.compile(r"\bfollow\s+(?:me\s+)?(?:on\s+)?" + _IG_WORD + r"\s*[:@]?\s*@?" + _HANDLE, re.IGNORECASE),
    re.compile(r"\bs[ií]gueme\s+en\s+" + _IG_WORD + r"\s*[:@]?\s*@?" + _HANDLE, re.IGNORECASE),
)

_AGGREGATOR_PATTERNS = (
    re.compile(r"linktr\.ee", re.IGNORECASE),
    re.compile(r"linkin\.bio", re.IGNORECASE),
    re.compile(r"beacons\.ai", re.IGNORECASE),
    re.compile(r"bio\.link", re.IGNORECASE),
    re.compile(r"linkbio", re.IGNORECASE),
    re.compile(r"allmylinks", re.IGNORECASE),
    re.compile(r"snipfeed", re.IGNORECASE),
    re.compile(r"stan\.store", re.IGNORECASE),
)

# An "@" not glued to a preceding word character, so email addresses are skipped.
_MENTION_RE = re.compile(r"(?<![A-Za-z0-9._])@([A-Za-z0-9._]+)")
_MIN_MENTION_LENGTH = 3

NOT_FOUND = SecondaryIdentity(handle=None, source=IdentitySource.NOT_FOUND, confidence=Confidence.LOW)


def _validated(raw: Optional[str]) -> Optional[str]:
    handle = clean_handle(raw)
    if is_valid_handle(handle):
        return handle
    return None


def handle_from_instagram_url(url: Optional[str]) -> Optional[str]:
    text = (url or "").strip()
    for pattern in _DIRECT_LINK_PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            handle = _validated(match.group(1))
            if handle:
                return handle
    return None


def direct_link(bio: str, link: Optional[str]) -> Optional[SecondaryIdentity]:
    handle = handle_from_instagram_url(link)
    if not handle:
        return None
    return SecondaryIdentity(handle=handle, source=IdentitySource.DIRECT_LINK, confidence=Confidence.HIGH)


def explicit_bio_pattern(bio: str, link: Optional[str]) -> Optional[SecondaryIdentity]:
    for pattern in _EXPLICIT_BIO_PATTERNS:
        match = pattern.search(bio or "")
        if not match:
            continue
        handle = _validated(match.group(1))
        if handle:
            return SecondaryIdentity(handle=handle, source=IdentitySource.BIO_TEXT_PATTERN, confidence=Confidence.HIGH)
    return None


def is_aggregator_link(link: Optional[str]) -> bool:
    return bool(link) and any(pattern.search(link) for pattern in _AGGREGATOR_PATTERNS)


def aggregator_link(bio: str, link: Optional[str]) -> Optional[SecondaryIdentity]:
    # The handle is behind the aggregator page, which is not scraped.
    if not is_aggregator_link(link):
        return None
    return SecondaryIdentity(handle=None, source=IdentitySource.AGGREGATOR_LINK, confidence=Confidence.MEDIUM)


def mention_candidates(bio: str) -> list[str]:
    seen = set()
    out = []
    for raw in _MENTION_RE.findall(bio or ""):
        handle = clean_handle(raw)
        if len(handle) < _MIN_MENTION_LENGTH or not is_valid_handle(handle):
            continue
        if PRIMARY_PLATFORM_NAME in handle.lower():
            continue
        if handle.lower() in seen:
            continue
        seen.add(handle.lower())
        out.append(handle)
    return out


def bare_mention(bio: str, link: Optional[str]) -> Optional[SecondaryIdentity]:
    candidates = mention_candidates(bio)
    if len(candidates) != 1:
        return None
    return SecondaryIdentity(handle=candidates[0], source=IdentitySource.BIO_MENTION, confidence=Confidence.LOW)


IDENTITY_STRATEGIES: tuple[IdentityStrategy, ...] = (
    direct_link,
    explicit_bio_pattern,
    aggregator_link,
    bare_mention,
)


def first_match(
    strategies: Iterable[IdentityStrategy], bio: str, link: Optional[str]
) -> Optional[SecondaryIdentity]:
    for strategy in strategies:
        identity = strategy(bio, link)
        if identity is not None:
            return identity
    return None


def extract_secondary_identity(
    bio: Optional[str],
    bio_link: Optional[str] = None,
    *,
    strategies: Iterable[IdentityStrategy] = IDENTITY_STRATEGIES,
) -> SecondaryIdentity:
    return first_match(strategies, bio or "", bio_link) or NOT_FOUND
