"""
Tests for wildcard file-name patterns.
"""
from __future__ import annotations

import pytest

from mcp_server_oss.core.patterns import compile_pattern, filter_names, glob_to_regex

NAMES = ["a.png", "b.jpg", "a.json"]


class TestFilterNames:
    """Tests for filter_names."""

    def test_extension_pattern(self):
        assert filter_names(NAMES, "*.png") == ["a.png"]

    def test_stem_pattern(self):
        assert filter_names(NAMES, "a.*") == ["a.png", "a.json"]

    def test_single_character_wildcard(self):
        names = ["a.png", "ab.png", "b.png"]
        assert filter_names(names, "?.png") == ["a.png", "b.png"]

    def test_no_pattern_keeps_everything(self):
        assert filter_names(NAMES, None) == NAMES
        assert filter_names(NAMES, "") == NAMES

    def test_preserves_input_order(self):
        assert filter_names(["z.png", "a.png"], "*.png") == ["z.png", "a.png"]


class TestCompilePattern:
    """Tests for compile_pattern matching rules."""

    def test_case_insensitive(self):
        matches = compile_pattern("*.PNG")
        assert matches("photo.png")
        assert matches("PHOTO.Png")

    def test_dot_is_literal(self):
        matches = compile_pattern("a.png")
        assert matches("a.png")
        assert not matches("axpng")

    def test_whole_name_only(self):
        matches = compile_pattern("icon_*")
        assert matches("icon_home.svg")
        assert not matches("my_icon_home.svg")

    def test_star_matches_empty(self):
        assert compile_pattern("icon*.svg")("icon.svg")

    def test_regex_characters_are_literal(self):
        matches = compile_pattern("logo(1)+.png")
        assert matches("logo(1)+.png")
        assert not matches("logo1.png")

    @pytest.mark.parametrize("name", ["a.png\n", "a.pngx"])
    def test_no_trailing_garbage(self, name: str):
        assert not compile_pattern("a.png")(name)


def test_glob_to_regex_is_anchored():
    regex = glob_to_regex("*.png")
    assert regex.pattern.startswith("^")
    assert regex.pattern.endswith("$")
