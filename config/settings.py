"""Application settings constants and environment-backed runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from engine.errors import ConfigurationError

# Per-request timeout; Apify runs actors synchronously, so calls can be slow.
DEFAULT_TIMEOUT_SECONDS = 60.0

# Minimum spacing between two requests made by the same provider client.
DEFAULT_MIN_INTERVAL_SECONDS = 0.0

# Concurrent profile lookups per query.
DEFAULT_MAX_WORKERS = 3

# Candidates requested from the sound search.
DEFAULT_SOUND_SEARCH_LIMIT = 10

DEFAULT_MAX_RESULTS = 5
MAX_RESULTS_CAP = 10


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    sociavault_api_key: Optional[str] = None
    apify_api_token: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS
    sound_search_limit: int = DEFAULT_SOUND_SEARCH_LIMIT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            sociavault_api_key=(env.get("SOCIAVAULT_API_KEY") or "").strip() or None,
            apify_api_token=(env.get("APIFY_API_TOKEN") or "").strip() or None,
            timeout_seconds=_float(env, "ARTIST_FINDER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            min_interval_seconds=_float(env, "ARTIST_FINDER_MIN_INTERVAL_SECONDS", DEFAULT_MIN_INTERVAL_SECONDS),
            max_workers=_int(env, "ARTIST_FINDER_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            sound_search_limit=_int(env, "ARTIST_FINDER_SOUND_SEARCH_LIMIT", DEFAULT_SOUND_SEARCH_LIMIT),
        )

    def validate(self) -> "Settings":
        if not self.sociavault_api_key:
            raise ConfigurationError("SOCIAVAULT_API_KEY is not configured")
        if not self.apify_api_token:
            raise ConfigurationError("APIFY_API_TOKEN is not configured")
        if self.max_workers < 1:
            raise ConfigurationError("ARTIST_FINDER_MAX_WORKERS must be at least 1")
        if self.sound_search_limit < 1:
            raise ConfigurationError("ARTIST_FINDER_SOUND_SEARCH_LIMIT must be at least 1")
        return self


def clamp_max_results(value, default: int = DEFAULT_MAX_RESULTS) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, min(MAX_RESULTS_CAP, number))
