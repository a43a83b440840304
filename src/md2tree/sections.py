"""Section boundary extraction and section-tree lookups."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from md2tree.document import Heading
from md2tree.exceptions import InvalidLevelError
from md2tree.schemas import Section
from md2tree.utils import byte_offset, get_heading_level, slugify, strip_markdown_inline

logger = logging.getLogger(__name__)

_FENCE = "```"


@dataclass(frozen=True)
class SectionSpan:
    """A located section body.

    ``offset`` is the byte offset just after the heading line and ``line`` the
    1-based line that follows the heading. ``content_line`` is the line of
    the first non-blank character of ``raw``.
    """

    raw: str
    offset: int
    line: int
    content_line: int


def locate_section(heading: Heading, full_content: str) -> SectionSpan | None:
    """Find a heading's section in the full source.

    The heading is matched by the first literal occurrence of
    ``"#" * level + " " + text``. Returns None when there is none, which
    happens for repeated headings or headings written with inline formatting.
    """
    search = f"{'#' * heading.level} {heading.text}"
    index = full_content.find(search)
    if index == -1:
        logger.debug("Heading not found verbatim in source: %r", search)
        return None

    line = full_content.count("\n", 0, index) + 1

    newline = full_content.find("\n", index)
    content_start = newline + 1 if newline != -1 else index
    section_content = full_content[content_start:]
    body = section_content[: find_next_heading(section_content, heading.level)]
    leading = body[: len(body) - len(body.lstrip())]

    return SectionSpan(
        raw=body.strip(),
        offset=byte_offset(full_content, content_start),
        line=line + 1,
        content_line=line + 1 + leading.count("\n"),
    )


def extract_section_content(heading: Heading, full_content: str) -> tuple[str, int, int]:
    """Return ``(raw_content, offset, line)`` for a heading's section.

    A heading that cannot be located yields an empty section ``("", 0, 0)``.
    """
    span = locate_section(heading, full_content)
    if span is None:
        return "", 0, 0
    return span.raw, span.offset, span.line


def find_next_heading(content: str, current_level: int) -> int:
    """Return the index of the next heading at ``current_level`` or shallower.

    Lines inside fenced code blocks are never treated as headings. Returns
    ``len(content)`` when the section runs to the end of the input.
    """
    in_code_block = False
    pos = 0

    for line in content.split("\n"):
        if line.lstrip().startswith(_FENCE):
            in_code_block = not in_code_block

        if not in_code_block:
            level = get_heading_level(line)
            if level is not None and level <= current_level:
                return pos

        pos += len(line) + 1

    return len(content)


def iter_sections(sections: Iterable[Section]) -> Iterable[Section]:
    """Yield sections in pre-order."""
    for section in sections:
        yield section
        yield from iter_sections(section.children)


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    title = strip_markdown_inline(title).strip().lower()
    return re.sub(r"\s+", " ", title)


def find_section(sections: Iterable[Section], name: str) -> Section | None:
    """Return the first section whose title or slug matches ``name``."""
    wanted = normalize_section_title(name)
    wanted_slug = slugify(name)
    for section in iter_sections(sections):
        if normalize_section_title(section.title) == wanted or section.slug == wanted_slug:
            return section
    return None


def section_at_line(sections: Iterable[Section], line: int) -> Section | None:
    """Return the deepest section whose heading sits at or before ``line``.

    Sections whose heading could not be located (position line 0) are skipped.
    """
    best: Section | None = None
    for section in iter_sections(sections):
        heading_line = section.position.line - 1
        if section.position.line == 0 or heading_line > line:
            continue
        if best is None or heading_line >= best.position.line - 1:
            best = section
    return best


def filter_sections(
    sections: list[Section],
    *,
    mode: str = "exclude",
    selected: Iterable[str] | None = None,
) -> list[Section]:
    """Filter sections by title using include or exclude mode."""
    selected_titles = {normalize_section_title(title) for title in (selected or []) if title.strip()}
    if not selected_titles:
        return sections

    def _filter(nodes: list[Section]) -> list[Section]:
        result: list[Section] = []
        for node in nodes:
            in_selected = normalize_section_title(node.title) in selected_titles
            if mode == "include":
                if in_selected:
                    result.append(node)
                else:
                    children = _filter(node.children)
                    if children:
                        result.append(node.model_copy(update={"children": children}))
            else:
                if in_selected:
                    continue
                result.append(node.model_copy(update={"children": _filter(node.children)}))
        return result

    return _filter(list(sections))


def filter_headings(
    headings: Iterable[Heading],
    *,
    text: str | None = None,
    level: int | None = None,
) -> list[Heading]:
    """Filter headings by case-insensitive substring and/or exact level.

    Raises:
        InvalidLevelError: If ``level`` is outside 1-6.
    """
    if level is not None and not 1 <= level <= 6:
        raise InvalidLevelError(f"Heading level must be between 1 and 6, got {level}")

    needle = text.lower() if text else None
    return [
        heading
        for heading in headings
        if (level is None or heading.level == level)
        and (needle is None or needle in heading.text.lower())
    ]


def count_headings_by_level(headings: Iterable[Heading]) -> dict[int, int]:
    """Count headings per level, keyed by level in ascending order."""
    counts: dict[int, int] = {}
    for heading in headings:
        counts[heading.level] = counts.get(heading.level, 0) + 1
    return dict(sorted(counts.items()))
