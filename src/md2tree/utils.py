"""String helpers shared by the heading, section, and link modules."""

from __future__ import annotations

import re

_SLUG_SEPARATOR_RE = re.compile(r"-+")


def strip_markdown_inline(text: str) -> str:
    """Strip inline markdown markers (bold, italic, code, strikethrough).

    Heading text extracted from the tokenizer has these markers removed while
    the raw source still contains them, so comparisons against user input or
    source lines go through this helper.
    """
    return text.replace("**", "").replace("*", "").replace("`", "").replace("~~", "")


def get_heading_level(line: str) -> int | None:
    """Return the ATX heading level of a line, or None if it is not a heading.

    A heading is 1-6 ``#`` characters (after leading whitespace) followed
    directly by whitespace.
    """
    trimmed = line.lstrip()
    level = 0
    for char in trimmed:
        if char == "#":
            level += 1
        elif char.isspace():
            return level if 0 < level <= 6 else None
        else:
            break
    return None


def slugify(text: str) -> str:
    """Generate a URL-safe identifier from heading text.

    Alphanumerics are lowercased and kept, whitespace and hyphens become
    separators, everything else is dropped. Runs of separators collapse and
    leading/trailing separators are removed.
    """
    chars: list[str] = []
    for char in text.lower():
        if char.isalnum():
            chars.append(char)
        elif char.isspace() or char == "-":
            chars.append("-")
    return _SLUG_SEPARATOR_RE.sub("-", "".join(chars)).strip("-")


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def byte_offset(text: str, index: int) -> int:
    """Convert a character index into a UTF-8 byte offset within ``text``."""
    return len(text[:index].encode("utf-8"))
