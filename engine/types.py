from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class Query:
    raw: str
    normalized: str
    tokens: tuple[str, ...]


@dataclass
class CandidateSong:
    song_id: str
    title: str
    author: str
    album: Optional[str] = None
    usage_count: int = 0
    # None when the provider does not report the flag at all.
    is_original: Optional[bool] = None
    is_official: bool = False
    is_author_artist: bool = False
    artist_handles: list[str] = field(default_factory=list)
    owner_handle: Optional[str] = None
    cover_url: Optional[str] = None
    duration: int = 0
    # (platform code, external track id) pairs, when the search result carries them.
    streaming_ids: list[tuple[int, str]] = field(default_factory=list)
    source: str = ""


@dataclass
class ResolvedSong:
    song_id: str
    title: str
    author: str
    album: Optional[str] = None
    usage_count: int = 0
    cover_url: Optional[str] = None
    source: str = ""

    @classmethod
    def from_candidate(cls, candidate: CandidateSong) -> "ResolvedSong":
        return cls(
            song_id=candidate.song_id,
            title=candidate.title,
            author=candidate.author,
            album=candidate.album,
            usage_count=candidate.usage_count,
            cover_url=candidate.cover_url,
            source=candidate.source,
        )


@dataclass
class OfficialArtist:
    handle: str
    nickname: str = ""
    verified: bool = False


@dataclass
class SongDetail:
    """Song detail record as reported by the music details endpoint."""

    title: str = ""
    author: str = ""
    album: Optional[str] = None
    usage_count: int = 0
    artists: list[OfficialArtist] = field(default_factory=list)
    owner_handle: Optional[str] = None
    owner_nickname: Optional[str] = None
    is_original_sound: bool = False
    # (platform code, external track id) pairs.
    streaming_ids: list[tuple[int, str]] = field(default_factory=list)
    cover_url: Optional[str] = None


@dataclass
class SocialProfile:
    handle: str
    nickname: str = ""
    bio: str = ""
    bio_link: Optional[str] = None
    verified: bool = False
    followers: int = 0
    likes: int = 0
    video_count: int = 0
    avatar_url: str = ""

    @classmethod
    def placeholder(cls, handle: str) -> "SocialProfile":
        return cls(handle=handle, nickname=handle)


class IdentitySource(Enum):
    DIRECT_LINK = "direct-link"
    BIO_TEXT_PATTERN = "bio-text-pattern"
    AGGREGATOR_LINK = "aggregator-link"
    BIO_MENTION = "bio-mention"
    NOT_FOUND = "not-found"


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class SecondaryIdentity:
    handle: Optional[str]
    source: IdentitySource
    confidence: Confidence

    @property
    def url(self) -> Optional[str]:
        if not self.handle:
            return None
        return f"https://instagram.com/{self.handle}"


def _identity_dict(identity: SecondaryIdentity) -> dict[str, Any]:
    return {
        "handle": identity.handle,
        "source": identity.source.value,
        "confidence": identity.confidence.value,
        "url": identity.url,
    }


@dataclass
class StreamingLinks:
    spotify: Optional[str] = None
    apple_music: Optional[str] = None
    amazon_music: Optional[str] = None

    def any(self) -> bool:
        return bool(self.spotify or self.apple_music or self.amazon_music)


@dataclass
class ArtistResult:
    profile: SocialProfile
    song: ResolvedSong
    identity: SecondaryIdentity
    streaming: StreamingLinks

    def to_dict(self) -> dict[str, Any]:
        return {
            "tiktok": asdict(self.profile),
            "song": asdict(self.song),
            "instagram": _identity_dict(self.identity),
            "streaming": asdict(self.streaming),
        }


@dataclass
class ProfileResult:
    profile: SocialProfile
    identity: SecondaryIdentity

    def to_dict(self) -> dict[str, Any]:
        return {
            "tiktok": asdict(self.profile),
            "instagram": _identity_dict(self.identity),
        }


@dataclass
class SoundResult:
    """One sound search hit as listed to callers, ordered as the provider returned it."""

    song: ResolvedSong
    duration: int
    is_original: Optional[bool]
    artist_handles: list[str]
    streaming: StreamingLinks

    def to_dict(self) -> dict[str, Any]:
        return {
            "song": asdict(self.song),
            "duration": self.duration,
            "is_original": self.is_original,
            "artists": list(self.artist_handles),
            "streaming": asdict(self.streaming),
        }
