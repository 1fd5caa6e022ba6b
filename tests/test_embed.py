# =============================================================================
# tests/test_embed.py - Embeddable URL Helper Tests
# =============================================================================

import pytest

from lib.embed import extract_iframe_src, map_embed_url, video_embed_url


class TestVideoEmbedUrl:

    @pytest.mark.parametrize("url,expected", [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "https://www.youtube.com/embed/dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42", "https://www.youtube.com/embed/dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ", "https://www.youtube.com/embed/dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", "https://www.youtube.com/embed/dQw4w9WgXcQ"),
        ("https://vimeo.com/76979871", "https://player.vimeo.com/video/76979871"),
        ("https://vimeo.com/channels/staffpicks/76979871/", "https://player.vimeo.com/video/76979871"),
        ("https://cdn.example.com/clip.mp4", "https://cdn.example.com/clip.mp4"),
    ])
    def test_rewrites(self, url, expected):
        assert video_embed_url(url) == expected

    def test_pasted_iframe(self):
        snippet = '<iframe width="560" src="https://www.youtube.com/embed/abc" frameborder="0"></iframe>'
        assert video_embed_url(snippet) == "https://www.youtube.com/embed/abc"


class TestMapEmbedUrl:

    def test_url_passes_through(self):
        url = "https://www.google.com/maps/embed?pb=!1m18"
        assert map_embed_url(url) == url

    def test_iframe_snippet_is_unwrapped(self):
        snippet = "<iframe src='https://www.google.com/maps/embed?pb=x' style='border:0'></iframe>"
        assert map_embed_url(snippet) == "https://www.google.com/maps/embed?pb=x"

    def test_plain_text_is_stripped(self):
        assert extract_iframe_src("  https://maps.test/a  ") == "https://maps.test/a"
