"""Tests for Location resolution helpers."""

import pytest
from redirector.redirect.uri import (
    LocationError,
    authority_of,
    host_of,
    referer_for,
    resolve_location,
    scheme_of,
)


class TestResolveLocation:
    """Tests for resolve_location."""

    def test_absolute_location_used_as_is(self):
        assert resolve_location("http://example.com?a=b", "http://test.com") == "http://test.com"

    def test_absolute_path(self):
        assert resolve_location("http://example.com?a=b", "/foo") == "http://example.com/foo"

    def test_relative_path_merged(self):
        assert resolve_location("http://example.com/a/b/c", "d") == "http://example.com/a/b/d"

    def test_dot_segments_removed(self):
        assert resolve_location("http://example.com/a/b/c", "../d") == "http://example.com/a/d"

    def test_query_only_reference_keeps_path(self):
        assert resolve_location("http://example.com/p?a=b", "?c=d") == "http://example.com/p?c=d"

    def test_port_inherited(self):
        assert resolve_location("http://example.com:8080/x", "/y") == "http://example.com:8080/y"

    def test_protocol_relative_inherits_scheme(self):
        assert resolve_location("https://example.com/x", "//other.com/y") == "https://other.com/y"

    def test_fragment_carried_over(self):
        assert resolve_location("http://example.com/x#top", "/y") == "http://example.com/y#top"

    def test_own_fragment_wins(self):
        assert resolve_location("http://example.com/x#top", "/y#end") == "http://example.com/y#end"

    def test_surrounding_whitespace_ignored(self):
        assert resolve_location("http://example.com", "  /foo ") == "http://example.com/foo"

    @pytest.mark.parametrize(
        "location",
        [
            "",
            "   ",
            "/foo bar",
            "/foo\x00",
            "http://[::1/",
            "http://example.com:port/",
            "http:///nohost",
        ],
    )
    def test_invalid_locations(self, location):
        with pytest.raises(LocationError):
            resolve_location("http://example.com", location)


class TestUrlHelpers:
    """Tests for scheme, host and Referer helpers."""

    def test_scheme_lowercased(self):
        assert scheme_of("HTTPS://Example.com") == "https"

    def test_host_lowercased_without_port(self):
        assert host_of("http://Example.COM:8080/x") == "example.com"

    def test_host_of_relative(self):
        assert host_of("/just/a/path") == ""

    def test_authority_keeps_port_drops_userinfo(self):
        assert authority_of("http://user:pw@Example.COM:8080/x") == "example.com:8080"

    def test_referer_keeps_query(self):
        assert referer_for("http://example.com?a=b") == "http://example.com?a=b"

    def test_referer_strips_userinfo_and_fragment(self):
        assert referer_for("https://user:pw@example.com/p?q=1#frag") == "https://example.com/p?q=1"
