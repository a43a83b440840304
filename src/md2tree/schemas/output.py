"""Exported document and ingestion models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from md2tree.schemas.sections import Section


class DocumentMetadata(BaseModel):
    source: str | None = None
    heading_count: int = 0
    max_depth: int = 0
    word_count: int = 0


class DocumentRoot(BaseModel):
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    sections: list[Section] = Field(default_factory=list)


class DocumentOutput(BaseModel):
    """Top-level export shape: ``{"document": {"metadata": ..., "sections": [...]}}``."""

    document: DocumentRoot = Field(default_factory=DocumentRoot)


class IngestionResult(BaseModel):
    """Text views of an ingested document.

    ``summary`` holds the metadata lines, ``sections_tree`` the indented
    section titles and ``content`` the re-rendered markdown.
    """

    summary: str
    sections_tree: str
    content: str
