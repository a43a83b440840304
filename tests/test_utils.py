"""Tests for string utilities."""

from __future__ import annotations

import pytest

from md2tree.utils import (
    byte_offset,
    count_words,
    get_heading_level,
    slugify,
    strip_markdown_inline,
)


class TestGetHeadingLevel:
    """Tests for get_heading_level function."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("# Title", 1),
            ("## Section", 2),
            ("### Subsection", 3),
            ("#### Level 4", 4),
            ("##### Level 5", 5),
            ("###### Six", 6),
            ("  ## Indented", 2),
            ("#\tTabbed", 1),
        ],
    )
    def test_valid_headings(self, line: str, expected: int) -> None:
        """One to six hashes followed by whitespace give the level."""
        assert get_heading_level(line) == expected

    @pytest.mark.parametrize(
        "line",
        ["####### Seven", "#NoSpace", "not a heading", "", "#", "text # not"],
    )
    def test_invalid_headings(self, line: str) -> None:
        """Lines that are not ATX headings give None."""
        assert get_heading_level(line) is None


class TestSlugify:
    """Tests for slugify function."""

    def test_punctuation_removed(self) -> None:
        """Punctuation is dropped and words are joined by hyphens."""
        assert slugify("Hello, World!") == "hello-world"

    def test_separators_collapse(self) -> None:
        """Runs of spaces and hyphens collapse to one hyphen."""
        assert slugify("a   b--c") == "a-b-c"

    def test_leading_and_trailing_separators_trimmed(self) -> None:
        """Separators at either end are trimmed."""
        assert slugify("  -Leading and trailing-  ") == "leading-and-trailing"

    def test_unicode_letters_kept(self) -> None:
        """Non-ASCII letters survive lowercasing."""
        assert slugify("Café Über") == "café-über"

    def test_only_punctuation_gives_empty_slug(self) -> None:
        """Text with no word characters gives an empty slug."""
        assert slugify("!!!") == ""

    @pytest.mark.parametrize(
        "text",
        ["Hello, World!", "a   b--c", "  Mixed_Case & Symbols  ", "Ünïcödé -- text", ""],
    )
    def test_idempotent(self, text: str) -> None:
        """Slugifying a slug returns it unchanged."""
        once = slugify(text)
        assert slugify(once) == once


class TestStripMarkdownInline:
    """Tests for strip_markdown_inline function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("**bold**", "bold"),
            ("*italic*", "italic"),
            ("`code`", "code"),
            ("~~strike~~", "strike"),
            ("**turbocli-parser** (850 LOC)", "turbocli-parser (850 LOC)"),
        ],
    )
    def test_markers_removed(self, text: str, expected: str) -> None:
        """Emphasis, code and strike markers are removed."""
        assert strip_markdown_inline(text) == expected


class TestCountWords:
    """Tests for count_words function."""

    def test_empty(self) -> None:
        """Empty text has no words."""
        assert count_words("") == 0

    def test_mixed_whitespace(self) -> None:
        """Any whitespace separates words."""
        assert count_words("one  two\nthree\tfour") == 4


class TestByteOffset:
    """Tests for byte_offset function."""

    def test_ascii_matches_index(self) -> None:
        """For ASCII text the byte offset equals the index."""
        assert byte_offset("hello", 3) == 3

    def test_multibyte_characters(self) -> None:
        """Multibyte characters count every byte."""
        assert byte_offset("héllo", 2) == 3
