"""Link detection and classification.

Four link dialects are recognized: in-document anchors (``#install``),
relative files with an optional anchor (``../guide.md#usage``), wikilinks
(``[[target]]`` / ``[[target|alias]]``) and external ``http(s)`` URLs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union
from urllib.parse import unquote

from markdown_it.token import Token

from md2tree.tokenizer import Tokenizer, default_tokenizer
from md2tree.utils import byte_offset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anchor:
    """Anchor to a heading in the current document."""

    fragment: str

    def __str__(self) -> str:
        return f"#{self.fragment}"


@dataclass(frozen=True)
class RelativeFile:
    """Relative file path, optionally pointing at an anchor inside it."""

    path: str
    anchor: str | None = None

    def __str__(self) -> str:
        return f"{self.path}#{self.anchor}" if self.anchor is not None else self.path


@dataclass(frozen=True)
class WikiLink:
    """Wikilink as used by Obsidian and other note-taking tools."""

    target: str
    alias: str | None = None

    def __str__(self) -> str:
        if self.alias is not None:
            return f"[[{self.target}|{self.alias}]]"
        return f"[[{self.target}]]"


@dataclass(frozen=True)
class External:
    url: str

    def __str__(self) -> str:
        return self.url


LinkTarget = Union[Anchor, RelativeFile, WikiLink, External]


@dataclass(frozen=True)
class Link:
    """A link found in markdown content.

    ``offset`` is the UTF-8 byte offset of the link's opening bracket (or
    ``<`` for autolinks) in the scanned text.
    """

    text: str
    target: LinkTarget
    offset: int


def extract_links(content: str, *, tokenizer: Tokenizer | None = None) -> list[Link]:
    """Extract every link in ``content``.

    Standard markdown links come first in document order, followed by
    wikilinks in document order. The combined list is therefore not sorted by
    offset when both kinds are present.
    """
    links = _extract_markdown_links(content, tokenizer or default_tokenizer(gfm=False))
    links.extend(_extract_wikilinks(content))
    return links


def parse_link_target(url: str) -> LinkTarget:
    """Classify a link destination."""
    if url.startswith("#"):
        return Anchor(url[1:])
    if url.startswith(("http://", "https://")):
        return External(url)
    path, sep, anchor = url.partition("#")
    return RelativeFile(path=path, anchor=anchor if sep else None)


def _extract_markdown_links(content: str, tokenizer: Tokenizer) -> list[Link]:
    line_starts = _line_starts(content)
    links: list[Link] = []
    cursor = 0

    for token in tokenizer.parse(content):
        if token.type != "inline" or not token.children:
            continue

        region_end = len(content)
        if token.map:
            cursor = max(cursor, line_starts[min(token.map[0], len(line_starts) - 1)])
            if token.map[1] < len(line_starts):
                region_end = line_starts[token.map[1]]

        in_link = False
        link_text = ""
        link_url = ""
        link_index = 0

        for child in token.children:
            if child.type == "link_open":
                in_link = True
                link_text = ""
                link_url = str(child.attrGet("href") or "")
                link_index = _locate_link(content, child, link_url, cursor, region_end)
                cursor = link_index + 1
            elif not in_link:
                continue
            elif child.type in ("text", "code_inline"):
                link_text += child.content
            elif child.type == "image":
                link_text += "".join(
                    grandchild.content
                    for grandchild in child.children or []
                    if grandchild.type in ("text", "code_inline")
                )
            elif child.type == "link_close":
                links.append(
                    Link(
                        text=link_text,
                        target=parse_link_target(link_url),
                        offset=byte_offset(content, link_index),
                    )
                )
                in_link = False

    return links


def _extract_wikilinks(content: str) -> list[Link]:
    links: list[Link] = []
    pos = 0

    while True:
        start = content.find("[[", pos)
        if start == -1:
            break
        close = content.find("]]", start + 2)
        if close == -1:
            logger.debug("Unterminated wikilink at index %d ignored", start)
            break
        pos = close + 2

        inner = content[start + 2 : close]
        if not inner:
            continue

        target, sep, alias = inner.partition("|")
        target = target.strip()
        alias_text = alias.strip() if sep else None
        links.append(
            Link(
                text=alias_text if alias_text is not None else target,
                target=WikiLink(target=target, alias=alias_text),
                offset=byte_offset(content, start),
            )
        )

    return links


def _line_starts(content: str) -> list[int]:
    starts = [0]
    index = content.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = content.find("\n", index + 1)
    return starts


def _locate_link(content: str, token: Token, href: str, start: int, end: int) -> int:
    """Find where a tokenized link starts in the source.

    Tokens carry line ranges but no character offsets, so the opening bracket
    is recovered by matching ``](destination`` and walking back to the
    balancing ``[``.
    """
    if token.markup == "autolink":
        found = content.find("<", start, end)
        return found if found != -1 else start

    candidates = {href, unquote(href)}
    close = content.find("](", start, end)
    while close != -1:
        destination = content[close + 2 : close + 2 + len(href) + 8].lstrip()
        destination = destination.removeprefix("<")
        if any(destination.startswith(candidate) for candidate in candidates):
            opening = _opening_bracket(content, close, start)
            if opening is not None:
                return opening
        close = content.find("](", close + 2, end)

    found = content.find("[", start, end)
    return found if found != -1 else start


def _opening_bracket(content: str, close: int, floor: int) -> int | None:
    depth = 0
    for index in range(close - 1, floor - 1, -1):
        char = content[index]
        if char == "]":
            depth += 1
        elif char == "[":
            if depth == 0:
                return index
            depth -= 1
    return None
