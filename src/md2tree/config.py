"""Local configuration for md2tree."""

from __future__ import annotations

import os


DEFAULT_MAX_NESTING_DEPTH = 32
DEFAULT_SOURCE_ENCODING = "utf-8"
DEFAULT_TOKEN_ENCODING = "o200k_base"
DEFAULT_OUTPUT_FORMAT = "plain"

# Ceiling on recursive block-quote/details parsing for untrusted input.
MD2TREE_MAX_NESTING_DEPTH = int(os.getenv("MD2TREE_MAX_NESTING_DEPTH", str(DEFAULT_MAX_NESTING_DEPTH)))
MD2TREE_SOURCE_ENCODING = os.getenv("MD2TREE_SOURCE_ENCODING", DEFAULT_SOURCE_ENCODING)
MD2TREE_TOKEN_ENCODING = os.getenv("MD2TREE_TOKEN_ENCODING", DEFAULT_TOKEN_ENCODING)
MD2TREE_DEFAULT_OUTPUT = os.getenv("MD2TREE_DEFAULT_OUTPUT", DEFAULT_OUTPUT_FORMAT)
