"""
Unit tests for the responsive source resolver.
"""

import math

import pytest

from richcontent.sources import (
    Dimensions,
    SrcsetCandidate,
    article_text_size,
    best_source,
    compute_display_dimensions,
    extract_video_id,
    is_video_host,
    parse_int,
    parse_srcset,
    pick_srcset_candidate,
    video_dimensions,
)

HOSTS = ("youtube.com", "youtube-nocookie.com", "youtu.be")


class TestPickSrcsetCandidate:
    def test_first_candidate_wide_enough(self):
        candidates = [
            SrcsetCandidate("u3", 1200),
            SrcsetCandidate("u1", 300),
            SrcsetCandidate("u2", 600),
        ]
        assert pick_srcset_candidate(candidates, 500, "default") == "u2"

    def test_exact_width_qualifies(self):
        assert pick_srcset_candidate([SrcsetCandidate("u1", 500)], 500, "d") == "u1"

    def test_none_wide_enough_falls_back(self):
        assert pick_srcset_candidate([SrcsetCandidate("u1", 300)], 500, "default") == "default"

    def test_empty_list_falls_back(self):
        assert pick_srcset_candidate([], 500, "default") == "default"


class TestParseSrcset:
    def test_width_descriptors(self):
        assert parse_srcset("a.jpg 300w, b.jpg 600w") == [
            SrcsetCandidate("a.jpg", 300),
            SrcsetCandidate("b.jpg", 600),
        ]

    def test_missing_descriptor_is_infinitely_wide(self):
        assert parse_srcset("a.jpg") == [SrcsetCandidate("a.jpg", math.inf)]

    def test_empty(self):
        assert parse_srcset(None) == []
        assert parse_srcset(" , ") == []


class TestBestSource:
    def test_srcset_wins_when_candidate_fits(self):
        attrs = {"src": "d.jpg", "srcset": "a.jpg 300w, b.jpg 600w"}
        assert best_source(attrs, 500) == "b.jpg"

    def test_src_when_viewport_is_wider(self):
        attrs = {"src": "d.jpg", "srcset": "a.jpg 300w, b.jpg 600w"}
        assert best_source(attrs, 1000) == "d.jpg"

    def test_unresolvable(self):
        assert best_source({}, 500) is None
        assert best_source(None, 500) is None
        assert best_source({"srcset": "a.jpg 300w"}, 500) is None


class TestDisplayDimensions:
    def test_capped_and_aspect_preserved(self):
        assert compute_display_dimensions(800, 400, 360) == Dimensions(360, 180)

    def test_string_attributes(self):
        assert compute_display_dimensions("800px", "400", 360) == Dimensions(360, 180)

    def test_smaller_than_max_keeps_size(self):
        assert compute_display_dimensions("100", "50", 360) == Dimensions(100, 50)

    def test_missing_dimensions_square_placeholder(self):
        assert compute_display_dimensions(None, None, 350, viewport_width=390) == Dimensions(350, 350)

    def test_non_numeric_dimensions(self):
        assert compute_display_dimensions("auto", "", 350, viewport_width=390) == Dimensions(350, 350)

    def test_video_dimensions(self):
        assert video_dimensions(390, 36) == Dimensions(354, 199)

    def test_parse_int(self):
        assert parse_int("640px") == 640
        assert parse_int(12) == 12
        assert parse_int("-5") is None
        assert parse_int(None) is None


class TestExtractVideoId:
    @pytest.mark.parametrize("url,expected", [
        ("https://www.youtube.com/embed/abc123?rel=0", "abc123"),
        ("https://www.youtube.com/embed/abc123", "abc123"),
        ("https://www.youtube.com/watch?v=xyz789&t=10", "xyz789"),
        ("https://www.youtube.com/watch?feature=share&v=xyz789", "xyz789"),
        ("https://youtu.be/abc123?t=5", "abc123"),
        ("https://youtu.be/abc123", "abc123"),
    ])
    def test_recognized_shapes(self, url, expected):
        assert extract_video_id(url) == expected

    @pytest.mark.parametrize("url", [
        "https://example.com/x",
        "https://www.youtube.com/embed/",
        "",
        None,
    ])
    def test_unrecognized(self, url):
        assert extract_video_id(url) is None


class TestVideoHost:
    def test_known_hosts(self):
        assert is_video_host("https://www.youtube.com/embed/x", HOSTS)
        assert is_video_host("https://youtu.be/x", HOSTS)
        assert is_video_host("//www.youtube-nocookie.com/embed/x", HOSTS)

    def test_other_hosts(self):
        assert not is_video_host("https://notyoutube.com/embed/x", HOSTS)
        assert not is_video_host("https://vimeo.com/1", HOSTS)
        assert not is_video_host(None, HOSTS)


class TestTextSize:
    def test_scales(self):
        assert article_text_size(19, "Small") == pytest.approx(17.1)
        assert article_text_size(19, "Large") == pytest.approx(24.7)
        assert article_text_size(19, "Medium") == 19
        assert article_text_size(19, None) == 19
