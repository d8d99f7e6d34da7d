"""
Unit tests for route signature matching.
"""

import re

import pytest

from httprouter.routing.pattern import PatternMatcher, RouteSignature, compile_signature


class TestPatternMatcher:
    """Tests for PatternMatcher class."""

    def test_match_single_group(self):
        """Test that a capture group is returned."""
        matcher = PatternMatcher()
        assert matcher.match("GET /products/([0-9]+)/?", "GET /products/2") == ("2",)

    def test_optional_trailing_slash(self):
        """Test that /? accepts the trailing slash."""
        matcher = PatternMatcher()
        assert matcher.match("GET /products/([0-9]+)/?", "GET /products/42/") == ("42",)

    def test_no_groups(self):
        """Test that a match without groups is an empty tuple, not None."""
        matcher = PatternMatcher()
        assert matcher.match("GET /health", "GET /health") == ()

    def test_multiple_groups_in_order(self):
        """Test that groups come back left to right."""
        matcher = PatternMatcher()
        result = matcher.match("GET /a/([a-z]+)/([0-9]+)", "GET /a/foo/7")
        assert result == ("foo", "7")

    def test_method_mismatch(self):
        """Test that a different method does not match."""
        matcher = PatternMatcher()
        assert matcher.match("GET /products", "POST /products") is None

    def test_anchored_both_ends(self):
        """Test that partial matches never count."""
        matcher = PatternMatcher()
        assert matcher.match("GET /products", "GET /products/2") is None
        assert matcher.match("GET /products", "XGET /products") is None

    def test_method_pattern_is_regex(self):
        """Test that one signature can accept several methods."""
        matcher = PatternMatcher()
        assert matcher.match("(GET|HEAD) /health", "HEAD /health") == ("HEAD",)
        assert matcher.match("([A-Z]+) /products/?(.*)", "VIEW /products/sale") == (
            "VIEW",
            "sale",
        )

    def test_controller_prefix_captures_rest(self):
        """Test the signature used for controllers."""
        matcher = PatternMatcher()
        signature = "([A-Z]+) /products/?(.*)"
        assert matcher.match(signature, "GET /products") == ("GET", "")
        assert matcher.match(signature, "GET /products/") == ("GET", "")
        assert matcher.match(signature, "GET /products/a/b") == ("GET", "a/b")

    def test_unmatched_optional_group_is_empty_string(self):
        """Test that groups outside the match do not shift positions."""
        matcher = PatternMatcher()
        result = matcher.match("GET /a(/([0-9]+))?/x", "GET /a/x")
        assert result == ("", "")

    def test_accepts_route_signature(self):
        """Test matching with a RouteSignature object."""
        matcher = PatternMatcher()
        signature = RouteSignature.parse("GET /products/([0-9]+)")
        assert matcher.match(signature, "GET /products/3") == ("3",)


class TestRouteSignature:
    """Tests for RouteSignature."""

    def test_parse(self):
        """Test splitting method and path at the first space."""
        signature = RouteSignature.parse("GET /products/([0-9]+)")
        assert signature.method_pattern == "GET"
        assert signature.path_pattern == "/products/([0-9]+)"
        assert str(signature) == "GET /products/([0-9]+)"

    def test_compile_escapes_slashes(self):
        """Test that slashes are escaped and the regex anchored."""
        pattern = compile_signature("GET /a/b")
        assert pattern.pattern == "^GET \\/a\\/b$"

    def test_compile_is_cached(self):
        """Test that compiling the same string twice reuses the pattern."""
        assert compile_signature("GET /cached") is compile_signature("GET /cached")

    def test_invalid_regex_raises(self):
        """Test that PatternMatcher itself reports a broken signature."""
        with pytest.raises(re.error):
            PatternMatcher().match("GET /products/([0-9]+", "GET /products/1")
