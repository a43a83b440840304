"""Assemble the exported section tree from a parsed document."""

from __future__ import annotations

import logging
from pathlib import Path

from md2tree.content import parse_content
from md2tree.document import Document, HeadingNode
from md2tree.schemas import (
    Block,
    Content,
    DocumentMetadata,
    DocumentOutput,
    DocumentRoot,
    Position,
    Section,
)
from md2tree.sections import locate_section
from md2tree.tokenizer import Tokenizer
from md2tree.utils import count_words, slugify

logger = logging.getLogger(__name__)


def build_json_output(
    document: Document,
    source_path: Path | str | None = None,
    *,
    tokenizer: Tokenizer | None = None,
) -> DocumentOutput:
    """Build the full section tree with parsed content and document metadata."""
    tree = document.build_tree()

    metadata = DocumentMetadata(
        source=str(source_path) if source_path is not None else None,
        heading_count=len(document.headings),
        max_depth=calculate_max_depth(tree),
        word_count=count_words(document.content),
    )
    logger.debug(
        "Building %d root sections from %d headings (max depth %d)",
        len(tree),
        metadata.heading_count,
        metadata.max_depth,
    )

    sections = [build_section(node, document.content, tokenizer=tokenizer) for node in tree]
    return DocumentOutput(document=DocumentRoot(metadata=metadata, sections=sections))


def build_section(
    node: HeadingNode, full_content: str, *, tokenizer: Tokenizer | None = None
) -> Section:
    """Build one exported section and its children.

    Every section is located against the full source so positions stay
    absolute at any depth.
    """
    heading = node.heading
    span = locate_section(heading, full_content)

    position = Position()
    raw = ""
    blocks: list[Block] = []
    if span is not None:
        position = Position(line=span.line, offset=span.offset)
        raw = span.raw
        if raw:
            blocks = parse_content(raw, span.content_line, tokenizer=tokenizer)

    slug = slugify(heading.text)
    return Section(
        id=slug,
        level=heading.level,
        title=heading.text,
        slug=slug,
        position=position,
        content=Content(raw=raw, blocks=blocks),
        children=[build_section(child, full_content, tokenizer=tokenizer) for child in node.children],
    )


def calculate_max_depth(tree: list[HeadingNode]) -> int:
    """Depth of the deepest branch; 0 for an empty forest."""
    return max((1 + calculate_max_depth(node.children) for node in tree), default=0)
