"""Collapsible ``<details>`` region handling.

The token grammar has no notion of an HTML region containing markdown, so
``<details>`` regions are cut out of the fragment before tokenizing and put
back as placeholders that the block parser swaps for parsed details blocks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

_DETAILS_OPEN = "<details"
_DETAILS_CLOSE = "</details>"
_SUMMARY_OPEN = "<summary"
_SUMMARY_CLOSE = "</summary>"
_PLACEHOLDER_RE = re.compile(r"^\[DETAILS_BLOCK_(\d+)\]$")


@dataclass
class DetailsRegion:
    """Summary text and raw (trimmed) body of one ``<details>`` region."""

    summary: str
    body: str


@dataclass
class LineShifts:
    """Maps lines of the placeholder text back to lines of the original text.

    Each anchor ``(line, shift)`` applies from that processed line onward.
    """

    anchors: list[tuple[int, int]] = field(default_factory=list)

    def original_line(self, line: int) -> int:
        shift = 0
        for start, delta in self.anchors:
            if start > line:
                break
            shift = delta
        return line + shift


def placeholder(index: int) -> str:
    return f"[DETAILS_BLOCK_{index}]"


def placeholder_index(text: str) -> int | None:
    """Return the region index if ``text`` is exactly one placeholder."""
    match = _PLACEHOLDER_RE.match(text.strip())
    return int(match.group(1)) if match else None


def split_details_regions(markdown: str) -> tuple[str, list[DetailsRegion], LineShifts]:
    """Replace every ``<details>...</details>`` region with a placeholder paragraph.

    Matching is literal: the first ``</details>`` after an opening tag closes
    it, so nested details regions are not recovered. An opening tag with no
    closing tag is left in place as literal text.

    The placeholder takes a different number of lines than the region it
    replaces; the returned ``LineShifts`` translates line numbers of the
    processed text back to the input.
    """
    regions: list[DetailsRegion] = []
    parts: list[str] = []
    shifts = LineShifts()
    processed_line = 0
    original_line = 0
    pos = 0

    while True:
        start = markdown.find(_DETAILS_OPEN, pos)
        if start == -1:
            break
        tag_end = markdown.find(">", start)
        if tag_end == -1:
            break
        body_start = tag_end + 1
        end = markdown.find(_DETAILS_CLOSE, body_start)
        if end == -1:
            logger.debug("Unterminated <details> region at index %d left as text", start)
            break

        summary, body = _split_summary(markdown[body_start:end])
        region_end = end + len(_DETAILS_CLOSE)
        # Keep the indentation so regions inside list items stay in the item.
        indent = markdown[markdown.rfind("\n", 0, start) + 1 : start]
        if indent.strip():
            indent = ""
        replacement = f"\n\n{indent}{placeholder(len(regions))}\n\n"

        chunk_lines = markdown.count("\n", pos, start)
        processed_line += chunk_lines + replacement.count("\n")
        original_line += chunk_lines + markdown.count("\n", start, region_end)
        shifts.anchors.append((processed_line, original_line - processed_line))

        parts.append(markdown[pos:start])
        parts.append(replacement)
        regions.append(DetailsRegion(summary=summary, body=body))
        pos = region_end

    parts.append(markdown[pos:])
    return "".join(parts), regions, shifts


def _split_summary(inner: str) -> tuple[str, str]:
    summary = ""
    summary_start = inner.find(_SUMMARY_OPEN)
    if summary_start != -1:
        tag_end = inner.find(">", summary_start)
        if tag_end != -1:
            summary_end = inner.find(_SUMMARY_CLOSE, tag_end + 1)
            if summary_end != -1:
                summary = _html_to_text(inner[tag_end + 1 : summary_end])

    close = inner.find(_SUMMARY_CLOSE)
    body = inner[close + len(_SUMMARY_CLOSE) :] if close != -1 else inner
    return summary, body.strip()


def _html_to_text(html: str) -> str:
    if not html.strip():
        return ""
    text = BeautifulSoup(html, "lxml").get_text()
    return re.sub(r"\s+", " ", text).strip()
