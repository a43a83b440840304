"""md2tree: parse markdown into heading trees, typed content blocks, and link catalogs."""

from md2tree.builder import build_json_output
from md2tree.content import parse_content
from md2tree.document import Document, Heading, HeadingNode, build_tree, parse_file, parse_markdown
from md2tree.exceptions import (
    InvalidLevelError,
    Md2treeError,
    OutputFormatError,
    SourceReadError,
)
from md2tree.ingestion import IngestionOptions, ingest_file, ingest_markdown
from md2tree.links import (
    Anchor,
    External,
    Link,
    LinkTarget,
    RelativeFile,
    WikiLink,
    extract_links,
    parse_link_target,
)
from md2tree.schemas import DocumentOutput, IngestionResult, Section
from md2tree.sections import extract_section_content
from md2tree.utils import get_heading_level, slugify

__all__ = [
    "Anchor",
    "Document",
    "DocumentOutput",
    "External",
    "Heading",
    "HeadingNode",
    "IngestionOptions",
    "IngestionResult",
    "InvalidLevelError",
    "Link",
    "LinkTarget",
    "Md2treeError",
    "OutputFormatError",
    "RelativeFile",
    "Section",
    "SourceReadError",
    "WikiLink",
    "build_json_output",
    "build_tree",
    "extract_links",
    "extract_section_content",
    "get_heading_level",
    "ingest_file",
    "ingest_markdown",
    "parse_content",
    "parse_file",
    "parse_link_target",
    "parse_markdown",
    "slugify",
]
