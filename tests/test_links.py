"""Tests for link extraction and classification."""

from __future__ import annotations

import pytest

from md2tree.links import (
    Anchor,
    External,
    Link,
    RelativeFile,
    WikiLink,
    extract_links,
    parse_link_target,
)


class TestExtractLinks:
    """Tests for extract_links function."""

    def test_anchor_and_wikilink(self) -> None:
        """Markdown links and wikilinks are both extracted."""
        content = "See [Installation](#installation) first. Then [[contributing]]."

        links = extract_links(content)

        assert links == [
            Link(text="Installation", target=Anchor("installation"), offset=4),
            Link(
                text="contributing",
                target=WikiLink("contributing"),
                offset=content.index("[["),
            ),
        ]

    def test_markdown_links_come_before_wikilinks(self) -> None:
        """Wikilinks are appended after all markdown links regardless of position."""
        links = extract_links("[[wiki]] then [std](#a)")

        assert [link.target for link in links] == [Anchor("a"), WikiLink("wiki")]
        assert links[0].offset == 14
        assert links[1].offset == 0

    def test_offsets_of_repeated_pattern(self) -> None:
        """Each link gets the offset of its own opening bracket."""
        links = extract_links("[a](#a) and [b](#b)")
        assert [link.offset for link in links] == [0, 12]

    def test_offsets_across_lines(self) -> None:
        """Offsets count from the start of the whole content."""
        content = "first line\n\n- [one](one.md)\n- [two](two.md)\n"

        links = extract_links(content)

        assert [link.offset for link in links] == [
            content.index("[one"),
            content.index("[two"),
        ]

    def test_offset_is_utf8_bytes(self) -> None:
        """Offsets count UTF-8 bytes."""
        links = extract_links("é [x](#y)")
        assert links[0].offset == 3

    def test_relative_file_with_anchor(self) -> None:
        """A file path with a fragment keeps both parts."""
        links = extract_links("Read [the guide](../guide.md#usage).")
        assert links[0].target == RelativeFile("../guide.md", "usage")

    def test_external(self) -> None:
        """http and https URLs are external."""
        links = extract_links("Visit [site](https://example.com/docs).")
        assert links[0].target == External("https://example.com/docs")

    def test_autolink(self) -> None:
        """Autolinks use the URL as their text."""
        links = extract_links("<https://example.com>")

        assert links == [
            Link(text="https://example.com", target=External("https://example.com"), offset=0)
        ]

    def test_badge_yields_outer_link(self) -> None:
        """A linked image yields the outer link with the image alt."""
        links = extract_links("[![CI](https://img.example.com/x.svg)](https://ci.example.com)")

        assert links == [Link(text="CI", target=External("https://ci.example.com"), offset=0)]

    def test_code_in_link_text(self) -> None:
        """Inline code counts as link text."""
        links = extract_links("[`api`](./api.md)")
        assert links[0].text == "api"
        assert links[0].target == RelativeFile("./api.md")

    def test_reference_link(self) -> None:
        """Reference-style links resolve through their definition."""
        links = extract_links("[ref text][r]\n\n[r]: ./doc.md#part\n")

        assert links == [
            Link(text="ref text", target=RelativeFile("./doc.md", "part"), offset=0)
        ]

    def test_wikilink_alias(self) -> None:
        """Wikilink target and alias are trimmed."""
        links = extract_links("[[ Target Note | shown ]]")
        assert links == [Link(text="shown", target=WikiLink("Target Note", "shown"), offset=0)]

    def test_unterminated_wikilink(self) -> None:
        """An opening [[ with no closing ]] ends the wikilink scan."""
        assert extract_links("This is [[incomplete") == []

    def test_empty_wikilink_skipped(self) -> None:
        """Empty wikilinks are skipped."""
        assert extract_links("[[]] and [[real]]") == [
            Link(text="real", target=WikiLink("real"), offset=9)
        ]

    def test_no_links(self) -> None:
        """Text without links gives no links."""
        assert extract_links("Plain text, no links. [not a link]") == []


class TestParseLinkTarget:
    """Tests for parse_link_target function."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("#section", Anchor("section")),
            ("http://example.com", External("http://example.com")),
            ("https://example.com/a#b", External("https://example.com/a#b")),
            ("docs/a.md", RelativeFile("docs/a.md")),
            ("docs/a.md#sec", RelativeFile("docs/a.md", "sec")),
            ("mailto:me@example.com", RelativeFile("mailto:me@example.com")),
        ],
    )
    def test_classification(self, url: str, expected: object) -> None:
        """URLs are classified by prefix."""
        assert parse_link_target(url) == expected


class TestLinkTargetStr:
    """Tests for the display form of link targets."""

    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            (Anchor("install"), "#install"),
            (RelativeFile("guide.md"), "guide.md"),
            (RelativeFile("guide.md", "usage"), "guide.md#usage"),
            (WikiLink("note"), "[[note]]"),
            (WikiLink("note", "alias"), "[[note|alias]]"),
            (External("https://example.com"), "https://example.com"),
        ],
    )
    def test_str(self, target: object, expected: str) -> None:
        """Targets render back to their display form."""
        assert str(target) == expected
