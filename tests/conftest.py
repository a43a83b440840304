"""Test setup for md2tree."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


SAMPLE_MARKDOWN = """# Title
Some content

## Section 1
More content

### Subsection
Details

## Section 2
End"""


@pytest.fixture
def sample_markdown() -> str:
    """Small document with three heading levels."""
    return SAMPLE_MARKDOWN


@pytest.fixture(autouse=True)
def _no_token_estimate(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tiktoken from downloading encodings during tests."""
    import md2tree.output_formatter

    monkeypatch.setattr(md2tree.output_formatter, "tiktoken", None)
