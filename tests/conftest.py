"""Pytest configuration and fixtures for stache tests."""

import pytest

from stache import DictLoader, Environment, MappingContext, Renderer
from stache.environment import terminal


@pytest.fixture(autouse=True)
def plain_terminal(monkeypatch):
    """Keep diagnostics free of ANSI codes so messages compare as text."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def renderer():
    """Create a Renderer with the default delimiters."""
    return Renderer()


@pytest.fixture
def env():
    """Create a basic strict Environment."""
    return Environment()


@pytest.fixture
def env_lenient():
    """Create an Environment that returns best-effort output on errors."""
    return Environment(strict=False)


@pytest.fixture
def env_with_partials():
    """Create an Environment with DictLoader and test partials."""
    loader = DictLoader(
        {
            "greeting": "Hello {{name}}!",
            "item": "- {{name}}\n",
            "list": "{{#items}}\n{{>item}}\n{{/items}}\n",
            "erb": "{{=<% %>=}}<% name %>",
            "broken": "{{#open}}never closed",
            "recursive": "[{{>recursive}}]",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def render_template():
    """Render with a fresh MappingContext; returns (output, renderer).

    The returned renderer exposes the error surface of the call.
    """

    def _render(template: str, data=None, partials=None, renderer=None):
        renderer = renderer or Renderer()
        loader = DictLoader(partials) if partials is not None else None
        output = renderer.render(template, MappingContext(data, loader=loader))
        return output, renderer

    return _render
