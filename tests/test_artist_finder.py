from __future__ import annotations

import pytest

from engine.artist_finder import ArtistFinder, build_artist_finder
from engine.errors import ConfigurationError
from engine.types import CandidateSong, Confidence, IdentitySource, OfficialArtist, SocialProfile, SongDetail
from config.settings import Settings
from fakes import FakeKeywordSearch, FakeProfiles, FakeSongDetails, FakeSoundSearch, video_item


def _luther(**kwargs):
    return CandidateSong(
        song_id="7449123456789012345",
        title="Luther",
        author="Kendrick Lamar",
        usage_count=200_000,
        is_official=True,
        source="sound-search",
        **kwargs,
    )


def _finder(sounds=None, videos=None, details=None, profiles=None, **kwargs):
    return ArtistFinder(
        sounds or FakeSoundSearch(),
        videos or FakeKeywordSearch(),
        details or FakeSongDetails(),
        profiles or FakeProfiles(),
        **kwargs,
    )


def test_resolves_song_and_derives_handle_from_author() -> None:
    profiles = FakeProfiles(
        {
            "kendricklamar": SocialProfile(
                handle="kendricklamar",
                nickname="Kendrick Lamar",
                bio="📸 @kendricklamar",
                verified=True,
                followers=12_000_000,
            )
        }
    )
    details = FakeSongDetails(SongDetail(title="Luther", author="Kendrick Lamar"))
    finder = _finder(FakeSoundSearch([_luther()]), details=details, profiles=profiles)

    results = finder.resolve_artists("Kendrick Lamar luther", 5)

    assert len(results) == 1
    result = results[0]
    assert result.profile.handle == "kendricklamar"
    assert result.song.song_id == "7449123456789012345"
    assert result.identity.handle == "kendricklamar"
    assert result.identity.source == IdentitySource.BIO_TEXT_PATTERN
    assert details.calls == ["7449123456789012345"]
    assert profiles.calls == ["kendricklamar"]


def test_no_relevant_candidate_returns_empty_list() -> None:
    sounds = FakeSoundSearch([CandidateSong(song_id="1", title="Other", author="Someone", usage_count=10**6)])
    videos = FakeKeywordSearch([video_item(id_str="2", title="Nope", author="Nobody")])
    details = FakeSongDetails()
    finder = _finder(sounds, videos, details=details)

    assert finder.resolve_artists("Kendrick Lamar luther") == []
    assert details.calls == []


def test_detail_record_drives_handles_links_and_song_fields() -> None:
    detail = SongDetail(
        title="luther",
        author="Kendrick Lamar & SZA",
        album="GNX",
        usage_count=1_500_000,
        artists=[OfficialArtist(handle="kendricklamar"), OfficialArtist(handle="SZA")],
        streaming_ids=[(1, "apple1"), (3, "spot3")],
        cover_url="https://img.example/gnx.jpg",
    )
    profiles = FakeProfiles(
        {
            "kendricklamar": SocialProfile(handle="kendricklamar", verified=False, followers=900),
            "sza": SocialProfile(handle="sza", verified=True, followers=10, bio_link="https://instagram.com/sza"),
        }
    )
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(detail), profiles=profiles)

    results = finder.resolve_artists("Kendrick Lamar luther", 5)

    assert [r.profile.handle for r in results] == ["sza", "kendricklamar"]
    sza = results[0]
    assert sza.identity.handle == "sza"
    assert sza.identity.source == IdentitySource.DIRECT_LINK
    assert sza.song.album == "GNX"
    assert sza.song.usage_count == 1_500_000
    assert sza.song.cover_url == "https://img.example/gnx.jpg"
    assert sza.streaming.spotify == "https://open.spotify.com/track/spot3"
    assert sza.streaming.apple_music == "https://music.apple.com/song/apple1"
    assert sza.streaming.amazon_music is None


def test_detail_failure_degrades_to_author_guess(upstream_error) -> None:
    profiles = FakeProfiles({"kendricklamar": SocialProfile(handle="kendricklamar", nickname="K")})
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(error=upstream_error), profiles=profiles)

    results = finder.resolve_artists("Kendrick Lamar luther")

    assert [r.profile.handle for r in results] == ["kendricklamar"]
    assert not results[0].streaming.any()


def test_profile_failures_are_isolated_per_handle() -> None:
    detail = SongDetail(artists=[OfficialArtist(handle="broken"), OfficialArtist(handle="working")])
    profiles = FakeProfiles({"working": SocialProfile(handle="working", followers=5)}, failing={"broken"})
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(detail), profiles=profiles)

    results = finder.resolve_artists("Kendrick Lamar luther")

    assert [r.profile.handle for r in results] == ["working"]
    assert sorted(profiles.calls) == ["broken", "working"]


def test_missing_profile_uses_placeholder() -> None:
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(SongDetail()))

    results = finder.resolve_artists("Kendrick Lamar luther")

    assert len(results) == 1
    assert results[0].profile.nickname == "kendricklamar"
    assert results[0].profile.followers == 0
    assert results[0].identity.confidence == Confidence.LOW


def test_max_results_bounds_enrichment() -> None:
    detail = SongDetail(artists=[OfficialArtist(handle=f"artist{i}") for i in range(6)])
    profiles = FakeProfiles()
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(detail), profiles=profiles, max_workers=2)

    results = finder.resolve_artists("Kendrick Lamar luther", 3)

    assert len(results) == 3
    assert sorted(profiles.calls) == ["artist0", "artist1", "artist2"]


def test_no_handles_is_empty_result() -> None:
    song = CandidateSong(song_id="1", title="luther", author="李", source="sound-search")
    profiles = FakeProfiles()
    finder = _finder(FakeSoundSearch([song]), details=FakeSongDetails(SongDetail(author="李")), profiles=profiles)

    assert finder.resolve_artists("luther") == []
    assert profiles.calls == []


def test_find_artist_returns_top_result_or_none() -> None:
    detail = SongDetail(artists=[OfficialArtist(handle="small"), OfficialArtist(handle="big")])
    profiles = FakeProfiles(
        {
            "small": SocialProfile(handle="small", followers=1),
            "big": SocialProfile(handle="big", followers=100),
        }
    )
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(detail), profiles=profiles)

    assert finder.find_artist("Kendrick Lamar luther").profile.handle == "big"
    assert _finder().find_artist("Kendrick Lamar luther") is None


def test_result_serializes_to_plain_dict() -> None:
    finder = _finder(FakeSoundSearch([_luther()]), details=FakeSongDetails(SongDetail()))
    payload = finder.resolve_artists("Kendrick Lamar luther")[0].to_dict()

    assert payload["tiktok"]["handle"] == "kendricklamar"
    assert payload["song"]["song_id"] == "7449123456789012345"
    assert payload["instagram"] == {"handle": None, "source": "not-found", "confidence": "low", "url": None}
    assert payload["streaming"] == {"spotify": None, "apple_music": None, "amazon_music": None}


def test_build_artist_finder_requires_credentials() -> None:
    with pytest.raises(ConfigurationError):
        build_artist_finder(Settings())
    with pytest.raises(ConfigurationError):
        build_artist_finder(Settings(sociavault_api_key="bad", apify_api_token="apify_api_x"))
    with pytest.raises(ConfigurationError):
        build_artist_finder(Settings(sociavault_api_key="sk_live_x", apify_api_token="bad"))


def test_build_artist_finder_wires_clients() -> None:
    finder = build_artist_finder(
        Settings(sociavault_api_key="sk_live_abc", apify_api_token="apify_api_abc", max_workers=4)
    )
    assert finder.max_workers == 4
    assert finder.song_details is finder.song_resolver.keyword_search
    assert finder.profiles is finder.song_resolver.sound_search


def test_get_profile_strips_at_and_extracts_identity() -> None:
    profiles = FakeProfiles(
        {"badbunnypr": SocialProfile(handle="badbunnypr", nickname="Bad Bunny", bio="IG: @badbunnypr", verified=True)}
    )
    finder = _finder(profiles=profiles)

    result = finder.get_profile("@badbunnypr")

    assert profiles.calls == ["badbunnypr"]
    assert result.profile.nickname == "Bad Bunny"
    assert result.identity.handle == "badbunnypr"
    assert result.identity.source == IdentitySource.BIO_TEXT_PATTERN
    assert result.to_dict()["instagram"]["url"] == "https://instagram.com/badbunnypr"


def test_get_profile_missing_or_failing_is_none() -> None:
    profiles = FakeProfiles(failing={"broken"})
    finder = _finder(profiles=profiles)

    assert finder.get_profile("ghost") is None
    assert finder.get_profile("broken") is None
    assert finder.get_profile("@") is None
    assert profiles.calls == ["ghost", "broken"]


def test_search_sounds_lists_provider_order_with_links() -> None:
    first = CandidateSong(
        song_id="1",
        title="Monaco",
        author="Bad Bunny",
        duration=267,
        is_original=False,
        artist_handles=["badbunnypr"],
        streaming_ids=[(3, "sp1"), (8, "legacy")],
        source="sound-search",
    )
    second = CandidateSong(song_id="2", title="Monaco (sped up)", author="someone", source="sound-search")
    third = CandidateSong(song_id="3", title="Other", author="x", source="sound-search")
    sounds = FakeSoundSearch([first, second, third])
    finder = _finder(sounds=sounds)

    results = finder.search_sounds("Monaco Bad Bunny", max_results=2)

    assert sounds.calls == [("Monaco Bad Bunny", 2)]
    assert [r.song.song_id for r in results] == ["1", "2"]
    assert results[0].streaming.spotify == "https://open.spotify.com/track/sp1"
    assert results[0].streaming.amazon_music is None
    assert results[0].to_dict()["artists"] == ["badbunnypr"]
    assert results[0].to_dict()["duration"] == 267
    assert results[1].is_original is None


def test_search_sounds_degrades_on_provider_error(upstream_error) -> None:
    finder = _finder(sounds=FakeSoundSearch(error=upstream_error))
    assert finder.search_sounds("Monaco") == []
    assert finder.search_sounds("   ") == []


def test_search_sounds_without_sound_provider_is_empty() -> None:
    finder = ArtistFinder(None, FakeKeywordSearch(), FakeSongDetails(), FakeProfiles())
    assert finder.search_sounds("Monaco") == []


def test_close_closes_each_provider_once() -> None:
    class _Closable:
        def __init__(self):
            self.closed = 0

        def close(self):
            self.closed += 1

    shared = _Closable()
    other = _Closable()
    finder = ArtistFinder(shared, other, other, shared)

    finder.close()

    assert shared.closed == 1
    assert other.closed == 1
