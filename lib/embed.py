# =============================================================================
# lib/embed.py - Embeddable URL Helpers
# =============================================================================
# Video and map sections store whatever URL the user pasted. These helpers
# turn it into something an <iframe> can load:
# - YouTube watch / short links  -> https://www.youtube.com/embed/{id}
# - Vimeo links                  -> https://player.vimeo.com/video/{id}
# - a pasted <iframe src="...">  -> its src
# Anything else is returned unchanged (and may not render).
# =============================================================================

import re
from urllib.parse import parse_qs, urlparse

YOUTUBE_EMBED = "https://www.youtube.com/embed/{video_id}"
VIMEO_EMBED = "https://player.vimeo.com/video/{video_id}"

_IFRAME_SRC = re.compile(r"""<iframe[^>]*\ssrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def extract_iframe_src(value: str) -> str:
    """Return the src of a pasted <iframe> snippet, or the value itself."""
    match = _IFRAME_SRC.search(value)
    return match.group(1) if match else value.strip()


def video_embed_url(url: str) -> str:
    """
    Rewrite a YouTube or Vimeo URL to its player URL.

    Examples:
        >>> video_embed_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        'https://www.youtube.com/embed/dQw4w9WgXcQ'
        >>> video_embed_url("https://youtu.be/dQw4w9WgXcQ")
        'https://www.youtube.com/embed/dQw4w9WgXcQ'
        >>> video_embed_url("https://vimeo.com/76979871")
        'https://player.vimeo.com/video/76979871'
        >>> video_embed_url("https://cdn.example.com/clip.mp4")
        'https://cdn.example.com/clip.mp4'
    """
    url = extract_iframe_src(url)
    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    host = (parsed.hostname or "").lower()

    if "youtube.com" in host or "youtu.be" in host:
        if parsed.path.startswith("/embed/"):
            return url
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if not video_id and len(parsed.path) > 1:
            video_id = parsed.path[1:]
        if video_id:
            return YOUTUBE_EMBED.format(video_id=video_id)

    if "vimeo.com" in host:
        video_id = parsed.path.rstrip("/").split("/")[-1]
        if video_id:
            return VIMEO_EMBED.format(video_id=video_id)

    return url


def map_embed_url(url: str) -> str:
    """Map URLs are used as given; only a pasted iframe snippet is unwrapped."""
    return extract_iframe_src(url)
