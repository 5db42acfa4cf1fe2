"""Error taxonomy for the artist resolution pipeline."""

from __future__ import annotations


class ArtistFinderError(Exception):
    pass


class ConfigurationError(ArtistFinderError):
    """Missing or malformed credentials; raised before any network call."""


class UpstreamError(ArtistFinderError):
    """Non-success response or transport failure from a search provider."""

    def __init__(self, message: str, *, provider: str, endpoint: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.endpoint = endpoint
        self.status_code = status_code
