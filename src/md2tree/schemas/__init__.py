"""Shared schemas for md2tree."""

from md2tree.schemas.blocks import (
    Alignment,
    Block,
    BlockquoteBlock,
    CodeBlock,
    CodeElement,
    DetailsBlock,
    EmphasisElement,
    HeadingBlock,
    HorizontalRuleBlock,
    ImageBlock,
    ImageElement,
    InlineElement,
    LinkElement,
    ListBlock,
    ListItem,
    ParagraphBlock,
    StrikethroughElement,
    StrongElement,
    TableBlock,
    TextElement,
)
from md2tree.schemas.output import (
    DocumentMetadata,
    DocumentOutput,
    DocumentRoot,
    IngestionResult,
)
from md2tree.schemas.sections import Content, Position, Section

__all__ = [
    "Alignment",
    "Block",
    "BlockquoteBlock",
    "CodeBlock",
    "CodeElement",
    "Content",
    "DetailsBlock",
    "DocumentMetadata",
    "DocumentOutput",
    "DocumentRoot",
    "EmphasisElement",
    "HeadingBlock",
    "HorizontalRuleBlock",
    "ImageBlock",
    "ImageElement",
    "IngestionResult",
    "InlineElement",
    "LinkElement",
    "ListBlock",
    "ListItem",
    "ParagraphBlock",
    "Position",
    "Section",
    "StrikethroughElement",
    "StrongElement",
    "TableBlock",
    "TextElement",
]
