"""Heading extraction and heading-tree construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from md2tree.config import MD2TREE_SOURCE_ENCODING
from md2tree.exceptions import SourceReadError
from md2tree.tokenizer import Tokenizer, default_tokenizer

# Inline token types whose content counts as heading text.
_HEADING_TEXT_TYPES = {"text", "code_inline"}


@dataclass(frozen=True)
class Heading:
    """A single heading with inline formatting stripped."""

    level: int
    text: str


@dataclass
class HeadingNode:
    """A heading and the contiguous run of deeper headings that follow it."""

    heading: Heading
    children: list[HeadingNode] = field(default_factory=list)


@dataclass
class Document:
    """Full markdown source plus its headings in document order."""

    content: str
    headings: list[Heading] = field(default_factory=list)

    def build_tree(self) -> list[HeadingNode]:
        return build_tree(self.headings)


def parse_markdown(content: str, *, tokenizer: Tokenizer | None = None) -> Document:
    """Scan markdown once and collect every heading as (level, text)."""
    tokens = (tokenizer or default_tokenizer(gfm=False)).parse(content)
    headings: list[Heading] = []
    current: tuple[int, list[str]] | None = None

    for token in tokens:
        if token.type == "heading_open":
            current = (int(token.tag[1]), [])
        elif token.type == "heading_close":
            if current is not None:
                level, parts = current
                headings.append(Heading(level=level, text="".join(parts).strip()))
            current = None
        elif token.type == "inline" and current is not None:
            for child in token.children or []:
                if child.type in _HEADING_TEXT_TYPES:
                    current[1].append(child.content)

    return Document(content=content, headings=headings)


def parse_file(path: Path | str, *, encoding: str = MD2TREE_SOURCE_ENCODING) -> Document:
    """Read a markdown file and parse its headings.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    try:
        content = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Failed to read markdown source {path}: {exc}") from exc
    return parse_markdown(content)


def build_tree(headings: list[Heading]) -> list[HeadingNode]:
    """Fold a flat heading sequence into a forest.

    A heading becomes a child of the nearest preceding heading with a strictly
    smaller level; headings of equal level are always siblings.
    """
    roots: list[HeadingNode] = []
    stack: list[HeadingNode] = []

    for heading in headings:
        node = HeadingNode(heading=heading)

        while stack and stack[-1].heading.level >= heading.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots
