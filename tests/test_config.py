"""Tests for environment-driven configuration."""

from __future__ import annotations

import importlib

import pytest

import md2tree.config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch):
    """Reload md2tree.config after the test changes the environment."""
    yield lambda: importlib.reload(md2tree.config)
    monkeypatch.undo()
    importlib.reload(md2tree.config)


class TestConfig:
    """Tests for md2tree.config."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, reload_config) -> None:
        """Without environment variables the defaults apply."""
        monkeypatch.delenv("MD2TREE_MAX_NESTING_DEPTH", raising=False)
        monkeypatch.delenv("MD2TREE_DEFAULT_OUTPUT", raising=False)

        config = reload_config()

        assert config.MD2TREE_MAX_NESTING_DEPTH == config.DEFAULT_MAX_NESTING_DEPTH
        assert config.MD2TREE_DEFAULT_OUTPUT == "plain"

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch, reload_config) -> None:
        """Environment variables override the defaults."""
        monkeypatch.setenv("MD2TREE_MAX_NESTING_DEPTH", "4")
        monkeypatch.setenv("MD2TREE_TOKEN_ENCODING", "cl100k_base")

        config = reload_config()

        assert config.MD2TREE_MAX_NESTING_DEPTH == 4
        assert config.MD2TREE_TOKEN_ENCODING == "cl100k_base"
