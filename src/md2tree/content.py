"""Parse a markdown fragment into typed content blocks.

The parser is a single pass over markdown-it's flat token stream. Block
structure the stream does not express directly is rebuilt here: list items
collect their own sub-blocks, block quotes and ``<details>`` bodies are parsed
recursively, and inline runs are flattened into one element per style.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from markdown_it.token import Token

from md2tree.config import MD2TREE_MAX_NESTING_DEPTH
from md2tree.html_utils import (
    DetailsRegion,
    LineShifts,
    placeholder_index,
    split_details_regions,
)
from md2tree.schemas import (
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
from md2tree.tokenizer import Tokenizer, default_tokenizer

logger = logging.getLogger(__name__)

_QUOTE_MARKER_RE = re.compile(r"^[ \t]*> ?")
# The opening line may also carry list markers before the quote marker.
_QUOTE_OPENING_RE = re.compile(r"^[^>]*> ?")
_ALIGN_RE = re.compile(r"text-align:\s*(left|center|right)")
_ALIGNMENTS: dict[str, Alignment] = {"left": "left", "center": "center", "right": "right"}
_TASK_CHECKBOX_CLASS = "task-list-item-checkbox"


def parse_content(
    markdown: str,
    starting_line: int = 0,
    *,
    tokenizer: Tokenizer | None = None,
    max_nesting_depth: int | None = None,
) -> list[Block]:
    """Parse a markdown fragment into an ordered list of blocks.

    ``starting_line`` is the line of the fragment's first line in the enclosing
    document; code block line numbers are reported relative to it. Block quote
    and details bodies are parsed recursively up to ``max_nesting_depth``
    levels (``MD2TREE_MAX_NESTING_DEPTH`` by default); deeper bodies keep their
    raw content with no parsed blocks.

    Never raises: unsupported or malformed constructs degrade to plain text or
    are dropped.
    """
    limit = MD2TREE_MAX_NESTING_DEPTH if max_nesting_depth is None else max_nesting_depth
    return _parse(markdown, starting_line, tokenizer or default_tokenizer(), limit, 0)


def _parse(
    markdown: str,
    starting_line: int,
    tokenizer: Tokenizer,
    max_depth: int,
    depth: int,
) -> list[Block]:
    processed, regions, shifts = split_details_regions(markdown)
    details = [_build_details(region, tokenizer, max_depth, depth) for region in regions]

    state = _ParserState(processed, starting_line, shifts, tokenizer, max_depth, depth)
    tokens = tokenizer.parse(processed)
    index = 0
    while index < len(tokens):
        index = state.process(tokens, index)
    state.finalize()

    if not details:
        return state.blocks
    return [_substitute_details(block, details) for block in state.blocks]


def _build_details(
    region: DetailsRegion, tokenizer: Tokenizer, max_depth: int, depth: int
) -> DetailsBlock:
    # Details bodies keep their own line numbering, starting at 0.
    blocks: list[Block] = []
    if region.body:
        blocks = _parse_nested(region.body, 0, tokenizer, max_depth, depth, kind="details")
    return DetailsBlock(summary=region.summary, content=region.body, blocks=blocks)


def _parse_nested(
    markdown: str,
    starting_line: int,
    tokenizer: Tokenizer,
    max_depth: int,
    depth: int,
    *,
    kind: str,
) -> list[Block]:
    if depth >= max_depth:
        logger.warning(
            "Nesting depth %d reached; %s body left unparsed", max_depth, kind
        )
        return []
    return _parse(markdown, starting_line, tokenizer, max_depth, depth + 1)


def _substitute_details(block: Block, details: list[DetailsBlock]) -> Block:
    if isinstance(block, ParagraphBlock):
        index = placeholder_index(block.content)
        if index is not None and index < len(details):
            return details[index]
    elif isinstance(block, ListBlock):
        for item in block.items:
            item.blocks = [_substitute_details(child, details) for child in item.blocks]
    return block


@dataclass
class _TextBuffer:
    """Accumulated plain text plus the matching inline elements."""

    text: str = ""
    inline: list[InlineElement] = field(default_factory=list)

    def clear(self) -> None:
        self.text = ""
        self.inline = []


class _ParserState:
    """Mutable state for one pass over a token stream.

    Only list and item state at depth 1 is flushed into the block sequence;
    text from deeper items is folded into the enclosing item as indented lines.
    """

    def __init__(
        self,
        source: str,
        starting_line: int,
        shifts: LineShifts,
        tokenizer: Tokenizer,
        max_depth: int,
        depth: int,
    ) -> None:
        self.source_lines = source.split("\n")
        self.starting_line = starting_line
        self.shifts = shifts
        self.tokenizer = tokenizer
        self.max_depth = max_depth
        self.depth = depth
        self.blocks: list[Block] = []

        self.paragraph = _TextBuffer()

        self.heading = _TextBuffer()
        self.heading_level: int | None = None

        self.list_items: list[ListItem] = []
        self.list_ordered = False
        self.list_depth = 0
        self.item_depth = 0
        self.item_lead: ParagraphBlock | None = None
        self.item_blocks: list[Block] = []
        self.task_marker: bool | None = None

        self.cell = _TextBuffer()
        self.in_table = False
        self.in_table_head = False
        self.table_headers: list[str] = []
        self.table_alignments: list[Alignment] = []
        self.table_rows: list[list[str]] = []
        self.current_row: list[str] = []

        self.in_strong = False
        self.in_emphasis = False
        self.in_strikethrough = False

        self.in_link = False
        self.link_url = ""
        self.link_title: str | None = None
        self.link_text = ""
        self.image_in_link = False
        self.saved_link_url = ""
        self.strip_next_text = False

    # Block sinks

    def emit(self, block: Block) -> None:
        if self.item_depth >= 1:
            self.item_blocks.append(block)
        else:
            self.blocks.append(block)

    def finalize(self) -> None:
        self.flush_paragraph()
        self.flush_list()
        self.flush_table()

    def flush_paragraph(self) -> None:
        # Inside list items the buffer belongs to the item, see flush_item.
        if self.item_depth == 0 and self.paragraph.text:
            self.blocks.append(
                ParagraphBlock(content=self.paragraph.text, inline=self.paragraph.inline)
            )
            self.paragraph.clear()

    def flush_list(self) -> None:
        if self.list_items:
            self.blocks.append(ListBlock(ordered=self.list_ordered, items=self.list_items))
        self.list_items = []

    def flush_table(self) -> None:
        if self.in_table and self.table_headers:
            self.emit(
                TableBlock(
                    headers=self.table_headers,
                    alignments=self.table_alignments,
                    rows=self.table_rows,
                )
            )
        self.table_headers = []
        self.table_alignments = []
        self.table_rows = []
        self.current_row = []
        self.cell.clear()
        self.in_table = False

    def flush_item(self) -> None:
        self.absorb_nested_text()
        if self.item_lead is not None:
            content, inline = self.item_lead.content, self.item_lead.inline
        else:
            content, inline = self.paragraph.text, self.paragraph.inline
        self.list_items.append(
            ListItem(
                checked=self.task_marker,
                content=content,
                inline=inline,
                blocks=self.item_blocks,
            )
        )
        self.paragraph.clear()
        self.item_lead = None
        self.item_blocks = []
        self.task_marker = None

    def absorb_nested_text(self) -> None:
        """Fold text left by nested items into the item's leading paragraph."""
        if not self.paragraph.text or self.item_lead is None:
            return
        self.item_lead = ParagraphBlock(
            content=self.item_lead.content + self.paragraph.text,
            inline=self.item_lead.inline + self.paragraph.inline,
        )
        self.paragraph.clear()

    # Token dispatch

    def process(self, tokens: list[Token], index: int) -> int:
        """Handle ``tokens[index]`` and return the index of the next token to process."""
        token = tokens[index]
        kind = token.type

        if kind == "paragraph_open":
            self.open_paragraph(token)
        elif kind == "paragraph_close":
            self.close_paragraph(token)
        elif kind == "heading_open":
            self.flush_paragraph()
            self.heading.clear()
            self.heading_level = int(token.tag[1])
        elif kind == "heading_close":
            if self.heading_level is not None and self.heading.text:
                self.emit(
                    HeadingBlock(
                        level=self.heading_level,
                        content=self.heading.text,
                        inline=self.heading.inline,
                    )
                )
            self.heading.clear()
            self.heading_level = None
        elif kind in ("fence", "code_block"):
            self.add_code(token)
        elif kind in ("bullet_list_open", "ordered_list_open"):
            self.list_depth += 1
            if self.list_depth == 1:
                self.flush_paragraph()
                self.list_ordered = kind == "ordered_list_open"
        elif kind in ("bullet_list_close", "ordered_list_close"):
            self.list_depth = max(self.list_depth - 1, 0)
            if self.list_depth == 0:
                self.flush_list()
        elif kind == "list_item_open":
            self.item_depth += 1
            if self.item_depth == 1:
                self.paragraph.clear()
                self.item_lead = None
                self.item_blocks = []
                self.task_marker = None
        elif kind == "list_item_close":
            if self.item_depth == 1:
                self.flush_item()
            self.item_depth = max(self.item_depth - 1, 0)
        elif kind == "blockquote_open":
            return self.add_blockquote(tokens, index)
        elif kind == "table_open":
            self.flush_paragraph()
            self.in_table = True
        elif kind == "table_close":
            self.flush_table()
        elif kind == "thead_open":
            self.in_table_head = True
        elif kind == "thead_close":
            self.in_table_head = False
        elif kind == "th_open":
            self.table_alignments.append(_alignment(token))
            self.cell.clear()
        elif kind == "td_open":
            self.cell.clear()
        elif kind in ("th_close", "td_close"):
            self.current_row.append(self.cell.text)
            self.cell.clear()
        elif kind == "tr_close":
            if self.in_table_head:
                self.table_headers = self.current_row
            else:
                self.table_rows.append(self.current_row)
            self.current_row = []
        elif kind == "hr":
            self.flush_paragraph()
            self.emit(HorizontalRuleBlock())
        elif kind == "inline":
            self.process_inline(token)

        return index + 1

    def open_paragraph(self, token: Token) -> None:
        # Tight list items wrap their text in hidden paragraphs.
        if token.hidden:
            return
        if self.item_depth == 1:
            self.absorb_nested_text()
            if self.paragraph.text:
                self.item_blocks.append(
                    ParagraphBlock(content=self.paragraph.text, inline=self.paragraph.inline)
                )
                self.paragraph.clear()

    def close_paragraph(self, token: Token) -> None:
        if token.hidden:
            return
        if self.item_depth == 0:
            self.flush_paragraph()
        elif self.item_depth == 1 and self.paragraph.text:
            block = ParagraphBlock(content=self.paragraph.text, inline=self.paragraph.inline)
            is_placeholder = placeholder_index(block.content) is not None
            if self.item_lead is None and not self.item_blocks and not is_placeholder:
                self.item_lead = block
            else:
                self.item_blocks.append(block)
            self.paragraph.clear()

    def add_code(self, token: Token) -> None:
        content = token.content.rstrip()
        if not content:
            return
        language = (token.info.strip() or None) if token.type == "fence" else None
        start, end = token.map or (0, 1)
        self.flush_paragraph()
        self.emit(
            CodeBlock(
                language=language,
                content=content,
                start_line=self.line_number(start),
                end_line=self.line_number(max(end - 1, start)),
            )
        )

    def line_number(self, line: int) -> int:
        """Translate a token map line into a line of the enclosing document."""
        return self.starting_line + self.shifts.original_line(line)

    def add_blockquote(self, tokens: list[Token], index: int) -> int:
        close = _matching_close(tokens, index)
        token = tokens[index]
        self.flush_paragraph()

        start, end = token.map or (0, 0)
        lines = [
            (_QUOTE_OPENING_RE if position == start else _QUOTE_MARKER_RE).sub("", line, count=1)
            for position, line in enumerate(self.source_lines[start:end], start)
        ]
        raw = "\n".join(lines).strip()
        if raw:
            blocks = _parse_nested(
                raw,
                self.line_number(start),
                self.tokenizer,
                self.max_depth,
                self.depth,
                kind="blockquote",
            )
            self.emit(BlockquoteBlock(content=raw, blocks=blocks))
        return close + 1

    # Inline handling

    def active_buffer(self) -> _TextBuffer:
        if self.heading_level is not None:
            return self.heading
        if self.in_table:
            return self.cell
        return self.paragraph

    def process_inline(self, token: Token) -> None:
        children = token.children or []
        standalone_image = (
            self.heading_level is None and not self.in_table and _is_standalone_image(children)
        )

        if self.item_depth > 1 and self.heading_level is None and not self.in_table:
            # Details regions in nested items belong to the top-level item.
            if placeholder_index(token.content) is not None:
                self.item_blocks.append(ParagraphBlock(content=token.content.strip()))
                return
            needs_newline = bool(self.paragraph.text) or self.item_lead is not None
            if needs_newline and not self.paragraph.text.endswith("\n"):
                self.paragraph.text += "\n"
            self.paragraph.text += "  " * (self.item_depth - 1)

        for child in children:
            kind = child.type
            if kind == "text":
                self.add_text(child.content)
            elif kind == "code_inline":
                self.add_text(child.content, code=True)
            elif kind == "softbreak":
                self.add_break(" ")
            elif kind == "hardbreak":
                self.add_break("\n")
            elif kind == "strong_open":
                self.in_strong = True
            elif kind == "strong_close":
                self.in_strong = False
            elif kind == "em_open":
                self.in_emphasis = True
            elif kind == "em_close":
                self.in_emphasis = False
            elif kind == "s_open":
                self.in_strikethrough = True
            elif kind == "s_close":
                self.in_strikethrough = False
            elif kind == "link_open":
                self.in_link = True
                self.link_url = child.attrGet("href") or ""
                self.link_title = child.attrGet("title") or None
                self.link_text = ""
            elif kind == "link_close":
                self.close_link()
            elif kind == "image":
                self.add_image(child, block_scope=standalone_image)
            elif kind == "html_inline" and _TASK_CHECKBOX_CLASS in child.content:
                self.add_task_marker('checked="checked"' in child.content)

    def add_task_marker(self, checked: bool) -> None:
        if self.item_depth > 1:
            self.paragraph.text += "[x] " if checked else "[ ] "
        else:
            self.task_marker = checked
        self.strip_next_text = True

    def add_text(self, text: str, *, code: bool = False) -> None:
        if self.strip_next_text:
            text = text.lstrip()
            self.strip_next_text = False
        if not text:
            return
        if self.in_link:
            self.link_text += text
            return
        buffer = self.active_buffer()
        buffer.text += text
        buffer.inline.append(self.styled(text, code=code))

    def add_break(self, value: str) -> None:
        if self.in_link:
            self.link_text += " "
            return
        buffer = self.active_buffer()
        buffer.text += value
        buffer.inline.append(TextElement(value=value))

    def styled(self, text: str, *, code: bool = False) -> InlineElement:
        if code:
            return CodeElement(value=text)
        if self.in_strong:
            return StrongElement(value=text)
        if self.in_emphasis:
            return EmphasisElement(value=text)
        if self.in_strikethrough:
            return StrikethroughElement(value=text)
        return TextElement(value=text)

    def close_link(self) -> None:
        # Badge pattern: the image replaced the active URL, the outer one is saved.
        url = self.saved_link_url if self.image_in_link else self.link_url
        element = LinkElement(text=self.link_text, url=url, title=self.link_title)

        buffer = self.active_buffer()
        if buffer is self.heading:
            buffer.text += self.link_text
        else:
            buffer.text += f"[{self.link_text}]({url})"
        buffer.inline.append(element)

        self.in_link = False
        self.link_url = ""
        self.link_title = None
        self.link_text = ""
        self.saved_link_url = ""
        self.image_in_link = False

    def add_image(self, token: Token, *, block_scope: bool) -> None:
        alt = _plain_text(token)
        src = token.attrGet("src") or ""
        title = token.attrGet("title") or None

        if self.in_link:
            self.image_in_link = True
            self.saved_link_url = self.link_url
            self.link_url = src
            self.link_text += alt
            return

        if block_scope:
            self.emit(ImageBlock(alt=alt, src=src, title=title))
            return

        buffer = self.active_buffer()
        buffer.text += alt if buffer is self.heading else f"[{alt}]"
        buffer.inline.append(ImageElement(alt=alt, src=src, title=title))


def _matching_close(tokens: list[Token], index: int) -> int:
    depth = 0
    for position in range(index, len(tokens)):
        depth += tokens[position].nesting if tokens[position].type.startswith("blockquote") else 0
        if depth == 0:
            return position
    return len(tokens) - 1


def _alignment(token: Token) -> Alignment:
    match = _ALIGN_RE.search(str(token.attrGet("style") or ""))
    return _ALIGNMENTS[match.group(1)] if match else "none"


def _plain_text(token: Token) -> str:
    if not token.children:
        return token.content
    return "".join(
        child.content for child in token.children if child.type in ("text", "code_inline")
    )


def _is_standalone_image(children: list[Token]) -> bool:
    significant = [
        child
        for child in children
        if child.type not in ("softbreak", "hardbreak")
        and not (child.type == "text" and not child.content.strip())
    ]
    return len(significant) == 1 and significant[0].type == "image"
