#!/usr/bin/env python3
"""
Find the TikTok artists behind a song.
- Resolves "artist and/or song" text to one song via sound search, then keyword search.
- Prints each artist's TikTok profile, Instagram handle found in the bio, and streaming links.
- Credentials come from SOCIAVAULT_API_KEY and APIFY_API_TOKEN.
"""

import argparse
import json
import logging
import sys

from config.settings import DEFAULT_MAX_RESULTS, clamp_max_results
from engine.artist_finder import build_artist_finder
from engine.errors import ConfigurationError
from engine.types import IdentitySource

EXAMPLES = ("Kendrick Lamar luther", "Bad Bunny Monaco", "Rosalia Malamente")


def format_number(value):
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def render_result(result, index=None):
    profile = result.profile
    song = result.song
    identity = result.identity
    streaming = result.streaming
    heading = "ARTIST" if index is None else f"ARTIST {index}"
    lines = ["=" * 50, heading, "=" * 50, "", "[Song]", f"  Title:    {song.title}", f"  Author:   {song.author}"]
    if song.album:
        lines.append(f"  Album:    {song.album}")
    if song.usage_count > 0:
        lines.append(f"  Used in:  {song.usage_count:,} videos")

    lines += [
        "",
        "[TikTok]",
        f"  Handle:    @{profile.handle}",
        f"  Name:      {profile.nickname}",
        f"  Followers: {format_number(profile.followers)}",
        f"  Videos:    {profile.video_count}",
        f"  Verified:  {'yes' if profile.verified else 'no'}",
    ]
    if profile.bio:
        lines.append(f"  Bio:       {profile.bio}")

    lines += ["", "[Instagram]"]
    if identity.handle:
        lines.append(f"  Handle:     @{identity.handle}")
        lines.append(f"  Source:     {identity.source.value} ({identity.confidence.value} confidence)")
        lines.append(f"  URL:        {identity.url}")
    elif identity.source is IdentitySource.AGGREGATOR_LINK:
        lines.append("  Link aggregator in bio; handle not resolved")
    else:
        lines.append("  Not found in profile")

    lines += ["", "[Streaming]"]
    if streaming.spotify:
        lines.append(f"  Spotify:      {streaming.spotify}")
    if streaming.apple_music:
        lines.append(f"  Apple Music:  {streaming.apple_music}")
    if streaming.amazon_music:
        lines.append(f"  Amazon Music: {streaming.amazon_music}")
    if not streaming.any():
        lines.append("  No streaming links found")
    return "\n".join(lines)


def _usage(parser):
    parser.print_help()
    print("\nExamples:")
    for example in EXAMPLES:
        print(f'  artist-finder "{example}"')


def main(argv=None):
    parser = argparse.ArgumentParser(description="Find TikTok artist profiles by song.")
    parser.add_argument("query", nargs="*", help="Artist name and/or song title.")
    parser.add_argument("--max-results", type=int, default=DEFAULT_MAX_RESULTS, help="Maximum artists to return (1-10).")
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Log pipeline progress.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    query = " ".join(args.query).strip()
    if not query:
        _usage(parser)
        return 0

    try:
        finder = build_artist_finder()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    results = finder.resolve_artists(query, clamp_max_results(args.max_results))
    if not results:
        print("Could not find any artist for this query.")
        print("Try another artist + song combination.")
        return 1

    if args.json:
        print(json.dumps([result.to_dict() for result in results], indent=2, ensure_ascii=False))
        return 0

    for index, result in enumerate(results, start=1):
        print(render_result(result, index if len(results) > 1 else None))
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
