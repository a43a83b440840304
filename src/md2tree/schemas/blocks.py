"""Content block and inline element models."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Alignment = Literal["left", "center", "right", "none"]


class TextElement(BaseModel):
    type: Literal["text"] = "text"
    value: str


class StrongElement(BaseModel):
    type: Literal["strong"] = "strong"
    value: str


class EmphasisElement(BaseModel):
    type: Literal["emphasis"] = "emphasis"
    value: str


class StrikethroughElement(BaseModel):
    type: Literal["strikethrough"] = "strikethrough"
    value: str


class CodeElement(BaseModel):
    type: Literal["code"] = "code"
    value: str


class LinkElement(BaseModel):
    type: Literal["link"] = "link"
    text: str
    url: str
    title: str | None = None


class ImageElement(BaseModel):
    type: Literal["image"] = "image"
    alt: str
    src: str
    title: str | None = None


InlineElement = Annotated[
    Union[
        TextElement,
        StrongElement,
        EmphasisElement,
        StrikethroughElement,
        CodeElement,
        LinkElement,
        ImageElement,
    ],
    Field(discriminator="type"),
]


class HeadingBlock(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    content: str
    inline: list[InlineElement] = Field(default_factory=list)


class ParagraphBlock(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    content: str
    inline: list[InlineElement] = Field(default_factory=list)


class ListItem(BaseModel):
    """A top-level list item.

    ``checked`` is only set for task-list items. ``blocks`` holds the
    item's sub-blocks beyond its leading text (typically fenced code).
    """

    checked: bool | None = None
    content: str = ""
    inline: list[InlineElement] = Field(default_factory=list)
    blocks: list["Block"] = Field(default_factory=list)


class ListBlock(BaseModel):
    type: Literal["list"] = "list"
    ordered: bool
    items: list[ListItem] = Field(default_factory=list)


class CodeBlock(BaseModel):
    type: Literal["code"] = "code"
    language: str | None = None
    content: str
    start_line: int = 0
    end_line: int = 0


class BlockquoteBlock(BaseModel):
    type: Literal["blockquote"] = "blockquote"
    content: str
    blocks: list["Block"] = Field(default_factory=list)


class TableBlock(BaseModel):
    type: Literal["table"] = "table"
    headers: list[str] = Field(default_factory=list)
    alignments: list[Alignment] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    alt: str
    src: str
    title: str | None = None


class HorizontalRuleBlock(BaseModel):
    type: Literal["horizontal_rule"] = "horizontal_rule"


class DetailsBlock(BaseModel):
    """A collapsible ``<details>`` region with its body parsed recursively."""

    type: Literal["details"] = "details"
    summary: str
    content: str
    blocks: list["Block"] = Field(default_factory=list)


Block = Annotated[
    Union[
        HeadingBlock,
        ParagraphBlock,
        ListBlock,
        CodeBlock,
        BlockquoteBlock,
        TableBlock,
        ImageBlock,
        HorizontalRuleBlock,
        DetailsBlock,
    ],
    Field(discriminator="type"),
]

for _model in (ListItem, ListBlock, BlockquoteBlock, DetailsBlock):
    _model.model_rebuild()
