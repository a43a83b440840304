"""Tests for details region splitting."""

from __future__ import annotations

from md2tree.html_utils import (
    DetailsRegion,
    LineShifts,
    placeholder,
    placeholder_index,
    split_details_regions,
)


class TestSplitDetailsRegions:
    """Tests for split_details_regions function."""

    def test_no_regions(self) -> None:
        """Text without details regions passes through unchanged."""
        text = "# Title\n\nbody"

        processed, regions, shifts = split_details_regions(text)

        assert processed == text
        assert regions == []
        assert shifts.anchors == []

    def test_region_replaced(self) -> None:
        """A region becomes a placeholder paragraph with its summary as text."""
        text = "before\n<details>\n<summary>Click <em>me</em></summary>\n\nbody\n</details>\nafter"

        processed, regions, _ = split_details_regions(text)

        assert regions == [DetailsRegion(summary="Click me", body="body")]
        assert placeholder(0) in processed
        assert "<details>" not in processed
        assert processed.startswith("before\n")
        assert processed.endswith("after")

    def test_placeholder_keeps_indentation(self) -> None:
        """Indentation before <details> is kept so list items own the region."""
        text = "- item\n\n  <details><summary>S</summary>\n  body\n  </details>\n"

        processed, _, _ = split_details_regions(text)

        assert f"\n  {placeholder(0)}" in processed

    def test_unterminated_region_left_in_place(self) -> None:
        """An opening tag with no closing tag stays as literal text."""
        text = "<details>\n<summary>S</summary>\nno end"

        processed, regions, _ = split_details_regions(text)

        assert processed == text
        assert regions == []

    def test_first_closing_tag_wins(self) -> None:
        """Nested regions are not recovered; the first </details> closes."""
        text = "<details>outer <details>inner</details> tail</details>"

        processed, regions, _ = split_details_regions(text)

        assert len(regions) == 1
        assert regions[0].body == "outer <details>inner"
        assert processed.rstrip().endswith("tail</details>")


class TestLineShifts:
    """Tests for mapping placeholder text lines back to the input."""

    def test_no_anchors_is_identity(self) -> None:
        """Without regions every line maps to itself."""
        assert LineShifts().original_line(7) == 7

    def test_short_region_shifts_back(self) -> None:
        """Lines after a region shorter than its placeholder move back."""
        text = "<details>\n<summary>S\nbody\n</details>\n\n```\ncode\n```"

        processed, _, shifts = split_details_regions(text)

        fence = processed.split("\n").index("```")
        assert fence == 6
        assert shifts.original_line(fence) == text.split("\n").index("```")
        assert shifts.original_line(fence) == 5

    def test_tall_region_shifts_forward(self) -> None:
        """Lines after a region taller than its placeholder move forward."""
        text = "<details>\n<summary>S</summary>\n\na\n\nb\n\nc\n</details>\nafter"

        processed, _, shifts = split_details_regions(text)

        after = processed.split("\n").index("after")
        assert shifts.original_line(after) == 9

    def test_lines_before_region_unchanged(self) -> None:
        """Lines before the first region are not shifted."""
        text = "one\ntwo\n<details>\n<summary>S</summary>\nx\n</details>\nthree"

        processed, _, shifts = split_details_regions(text)

        assert shifts.original_line(1) == 1
        assert shifts.original_line(processed.split("\n").index("three")) == 6


class TestPlaceholderIndex:
    """Tests for placeholder_index function."""

    def test_matches_placeholder(self) -> None:
        """Placeholder text yields its region index, surrounding space allowed."""
        assert placeholder_index(placeholder(3)) == 3
        assert placeholder_index(f"  {placeholder(12)}\n") == 12

    def test_rejects_other_text(self) -> None:
        """Text that is not exactly one placeholder is rejected."""
        assert placeholder_index("text [DETAILS_BLOCK_0]") is None
        assert placeholder_index("[DETAILS_BLOCK_x]") is None
