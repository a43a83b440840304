"""Markdown tokenizer boundary.

The parsers only rely on markdown-it's flat token stream (open/close pairs,
``inline`` tokens with children, ``map`` line ranges), so any object with a
compatible ``parse`` method can be injected in place of the defaults.
"""

from __future__ import annotations

from typing import Protocol

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.tasklists import tasklists_plugin


class Tokenizer(Protocol):
    """Anything that turns markdown source into a markdown-it token stream."""

    def parse(self, src: str, env: dict | None = None) -> list[Token]: ...


def create_tokenizer(*, gfm: bool = True) -> MarkdownIt:
    """Build a CommonMark tokenizer, optionally with GFM tables, strikethrough and task lists."""
    md = MarkdownIt("commonmark")
    if gfm:
        md.enable(["table", "strikethrough"])
        md.use(tasklists_plugin)
    return md


# Shared instances; MarkdownIt keeps no per-document state between parse calls.
_COMMONMARK = create_tokenizer(gfm=False)
_GFM = create_tokenizer(gfm=True)


def default_tokenizer(gfm: bool = True) -> MarkdownIt:
    """Return the shared tokenizer instance for the requested dialect."""
    return _GFM if gfm else _COMMONMARK
