import logging
from typing import Iterable

from engine.types import StreamingLinks

logger = logging.getLogger(__name__)

# Platform codes used by the music details endpoint.
APPLE_MUSIC = 1
AMAZON_MUSIC = 2
SPOTIFY = 3

_URL_TEMPLATES = {
    APPLE_MUSIC: ("apple_music", "https://music.apple.com/song/{song_id}"),
    AMAZON_MUSIC: ("amazon_music", "https://music.amazon.com/albums/{song_id}"),
    SPOTIFY: ("spotify", "https://open.spotify.com/track/{song_id}"),
}


def extract_streaming_links(streaming_ids: Iterable[tuple[int, str]] | None) -> StreamingLinks:
    links = StreamingLinks()
    for platform, song_id in streaming_ids or []:
        mapping = _URL_TEMPLATES.get(platform)
        if mapping is None:
            logger.debug("Ignoring unknown streaming platform code=%s song_id=%s", platform, song_id)
            continue
        field_name, template = mapping
        setattr(links, field_name, template.format(song_id=song_id))
    return links
