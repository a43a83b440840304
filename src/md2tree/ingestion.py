"""Ingestion pipeline for markdown text or files -> formatted outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from md2tree.builder import build_json_output
from md2tree.document import Document, parse_file, parse_markdown
from md2tree.output_formatter import format_result
from md2tree.schemas import IngestionResult
from md2tree.sections import filter_sections


@dataclass
class IngestionOptions:
    """Options for document ingestion.

    Attributes:
        section_filter_mode: Mode for section filtering ("include" or "exclude").
        sections: List of section titles to include or exclude.
        include_toc: If True, prepend a table of contents to the content.
    """

    section_filter_mode: Literal["include", "exclude"] = "exclude"
    sections: list[str] = field(default_factory=list)
    include_toc: bool = True


def ingest_markdown(
    content: str,
    *,
    source: str | None = None,
    options: IngestionOptions | None = None,
) -> IngestionResult:
    """Parse markdown text and format its summary, section tree, and content."""
    return _ingest_document(parse_markdown(content), source, options or IngestionOptions())


def ingest_file(path: Path | str, options: IngestionOptions | None = None) -> IngestionResult:
    """Read a markdown file and ingest it.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    return _ingest_document(parse_file(path), str(path), options or IngestionOptions())


def _ingest_document(
    document: Document, source: str | None, opts: IngestionOptions
) -> IngestionResult:
    output = build_json_output(document, source)
    sections = filter_sections(
        output.document.sections, mode=opts.section_filter_mode, selected=opts.sections
    )
    return format_result(output, sections=sections, include_toc=opts.include_toc)
