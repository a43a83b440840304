"""Format parsed documents into summary, tree, plain, and JSON outputs."""

from __future__ import annotations

import json
from typing import Callable, Iterable, Iterator, Sequence, TypeVar

try:
    import tiktoken
except ImportError:  # pragma: no cover - optional dependency
    tiktoken = None

from md2tree.config import MD2TREE_DEFAULT_OUTPUT, MD2TREE_TOKEN_ENCODING
from md2tree.document import Heading, HeadingNode, build_tree
from md2tree.exceptions import OutputFormatError
from md2tree.links import Link
from md2tree.schemas import DocumentOutput, IngestionResult, Section
from md2tree.sections import find_next_heading, iter_sections

OUTPUT_FORMATS = ("plain", "tree", "json")

_Node = TypeVar("_Node")


def format_result(
    output: DocumentOutput,
    *,
    sections: list[Section] | None = None,
    include_toc: bool = True,
) -> IngestionResult:
    """Create summary, section tree, and content.

    ``sections`` overrides the document's sections, e.g. after filtering;
    the metadata always describes the whole document.
    """
    selected = output.document.sections if sections is None else sections
    metadata = output.document.metadata

    tree = "Sections:\n" + _create_sections_tree(selected)
    content = _render_content(selected, include_toc=include_toc)

    summary_lines = []
    if metadata.source:
        summary_lines.append(f"Source: {metadata.source}")
    summary_lines.append(f"Headings: {metadata.heading_count}")
    summary_lines.append(f"Max depth: {metadata.max_depth}")
    summary_lines.append(f"Words: {metadata.word_count}")
    summary_lines.append(f"Sections: {count_sections(selected)}")

    token_estimate = _format_token_count(tree + "\n" + content)
    if token_estimate:
        summary_lines.append(f"Estimated tokens: {token_estimate}")

    return IngestionResult(
        summary="\n".join(summary_lines), sections_tree=tree, content=content
    )


def format_document(output: DocumentOutput, output_format: str = MD2TREE_DEFAULT_OUTPUT) -> str:
    """Serialize an exported document as ``plain``, ``tree`` or ``json``."""
    _check_format(output_format)
    if output_format == "json":
        return output.model_dump_json(indent=2)
    if output_format == "tree":
        return _render_box_tree(
            output.document.sections, label=lambda s: s.title, children=lambda s: s.children
        )
    return _render_content(output.document.sections, include_toc=False)


def format_headings(headings: Sequence[Heading], output_format: str = MD2TREE_DEFAULT_OUTPUT) -> str:
    """Render a heading list as ``plain`` lines, a box-drawing ``tree`` or ``json``."""
    _check_format(output_format)
    if output_format == "json":
        return json.dumps(
            [{"level": heading.level, "text": heading.text} for heading in headings], indent=2
        )
    if output_format == "tree":
        return _render_box_tree(
            build_tree(list(headings)),
            label=_heading_node_label,
            children=lambda node: node.children,
        )
    return "\n".join(f"{'#' * heading.level} {heading.text}" for heading in headings)


def format_heading_counts(counts: dict[int, int]) -> str:
    """Render per-level heading counts followed by the total."""
    lines = [f"H{level}: {count}" for level, count in counts.items()]
    lines.append(f"Total: {sum(counts.values())}")
    return "\n".join(lines)


def format_section(section: Section) -> str:
    """Render one section (heading, own text, children) as markdown."""
    return "\n\n".join(block for block in _render_section(section) if block).strip()


def format_links(links: Iterable[Link]) -> str:
    """Render a numbered link list: ``[n] text -> target``."""
    return "\n".join(
        f"[{number}] {link.text} -> {link.target}" for number, link in enumerate(links, start=1)
    )


def count_sections(sections: Iterable[Section]) -> int:
    """Count total sections in the tree."""
    return sum(1 for _ in iter_sections(sections))


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise OutputFormatError(
            f"Unsupported output format {output_format!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
        )


def _heading_node_label(node: HeadingNode) -> str:
    return f"{'#' * node.heading.level} {node.heading.text}"


def _render_content(sections: list[Section], *, include_toc: bool) -> str:
    blocks: list[str] = []
    if include_toc:
        toc = _render_toc(sections)
        if toc:
            blocks.append("## Contents\n" + toc)

    for section in sections:
        blocks.extend(_render_section(section))

    return "\n\n".join(block for block in blocks if block).strip()


def _render_section(section: Section) -> list[str]:
    blocks: list[str] = [f"{'#' * section.level} {section.title}"]
    # Raw content runs through the subsections, which are rendered on their own.
    raw = section.content.raw
    own = raw[: find_next_heading(raw, 6)].strip()
    if own:
        blocks.append(own)
    for child in section.children:
        blocks.extend(_render_section(child))
    return blocks


def _outline(
    sections: Iterable[Section], line: Callable[[Section, int], str], depth: int = 0
) -> Iterator[str]:
    for section in sections:
        yield line(section, depth)
        yield from _outline(section.children, line, depth + 1)


def _render_toc(sections: list[Section]) -> str:
    return "\n".join(
        _outline(sections, lambda section, depth: f"{'  ' * depth}- [{section.title}](#{section.slug})")
    )


def _create_sections_tree(sections: list[Section]) -> str:
    return "\n".join(_outline(sections, lambda section, depth: " " * (depth * 4) + section.title))


def _render_box_tree(
    nodes: Sequence[_Node],
    *,
    label: Callable[[_Node], str],
    children: Callable[[_Node], Sequence[_Node]],
    prefix: str = "",
) -> str:
    lines: list[str] = []
    for index, node in enumerate(nodes):
        last = index == len(nodes) - 1
        lines.append(f"{prefix}{'└── ' if last else '├── '}{label(node)}")
        kids = children(node)
        if kids:
            lines.append(
                _render_box_tree(
                    kids,
                    label=label,
                    children=children,
                    prefix=prefix + ("    " if last else "│   "),
                )
            )
    return "\n".join(lines)


def _format_token_count(text: str) -> str | None:
    if not tiktoken:
        return None
    try:
        encoding = tiktoken.get_encoding(MD2TREE_TOKEN_ENCODING)
        total_tokens = len(encoding.encode(text, disallowed_special=()))
    except Exception:
        return None

    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
