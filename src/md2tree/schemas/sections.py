"""Section tree models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from md2tree.schemas.blocks import Block


class Position(BaseModel):
    """Where a section's content starts in the full source.

    ``line`` is 1-based, ``offset`` is a UTF-8 byte offset. Both are 0 when
    the heading could not be located in the source.
    """

    line: int = 0
    offset: int = 0


class Content(BaseModel):
    raw: str = ""
    blocks: list[Block] = Field(default_factory=list)


class Section(BaseModel):
    """A hierarchical section node."""

    id: str
    level: int = Field(..., ge=1, le=6)
    title: str
    slug: str
    position: Position = Field(default_factory=Position)
    content: Content = Field(default_factory=Content)
    children: list["Section"] = Field(default_factory=list)
