"""Environment: configuration shared by templates.

The Environment holds everything that is constant across renders: the
partial loader, the default delimiters, custom section functions, the partial
depth limit and the error policy. Each render builds a fresh `Renderer` and
`Context`, so one Environment can serve concurrent renders.

Example:
    >>> env = Environment(loader=DictLoader({"item": "- {{name}}\\n"}))
    >>> env.render("{{#items}}{{>item}}{{/items}}", {"items": [{"name": "a"}]})
    '- a\\n'

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stache.context.base import Context, Loader
from stache.context.mapping import MappingContext
from stache.environment.exceptions import TemplateNotFoundError
from stache.environment.loaders import DictLoader
from stache.environment.registry import FunctionRegistry, SectionFunction
from stache.renderer import Renderer
from stache.template import Template


class Environment:
    """Central configuration for stache templates.

    Args:
        loader: Partial/template loader (None: partials render empty)
        delimiters: Default start/end markers for every render and partial
        functions: Custom section functions, shared by all renders
        max_partial_depth: Nesting limit for partial expansion
        strict: Raise `TemplateRenderError` when a render records an error.
            When False the best-effort output is returned and a warning is
            logged.

    Raises:
        ValueError: If the delimiters are invalid

    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        delimiters: tuple[str, str] = ("{{", "}}"),
        functions: Mapping[str, SectionFunction] | None = None,
        max_partial_depth: int = 50,
        strict: bool = True,
    ):
        # Validates the delimiters up front
        self.delimiters = Renderer(delimiters).delimiters
        self.loader = loader
        self.functions = FunctionRegistry(functions)
        self.max_partial_depth = max_partial_depth
        self.strict = strict
        self._cache: dict[str, Template] = {}

    def make_renderer(self) -> Renderer:
        """Fresh renderer configured with this environment's settings."""
        return Renderer(self.delimiters, max_partial_depth=self.max_partial_depth)

    def make_context(self, data: Any = None) -> Context:
        """Wrap data in a MappingContext; an existing Context is used as-is."""
        if isinstance(data, Context):
            return data
        return MappingContext(data, loader=self.loader, functions=self.functions)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Create a template from source text (not cached)."""
        return Template(self, source, name=name)

    def get_template(self, name: str) -> Template:
        """Load a template by name through the loader (cached by name).

        Raises:
            TemplateNotFoundError: If there is no loader or it lacks ``name``
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        if self.loader is None:
            raise TemplateNotFoundError(f"Template '{name}' not found: no loader configured")
        source, filename = self.loader.get_source(name)
        template = Template(self, source, name=name, filename=filename)
        self._cache[name] = template
        return template

    def clear_cache(self) -> None:
        self._cache.clear()

    def render(self, source: str, data: Any = None, **kwargs: Any) -> str:
        """Render template source in one call."""
        return self.from_string(source).render(data, **kwargs)

    def __repr__(self) -> str:
        start, end = self.delimiters
        return f"<Environment delimiters={start!r} {end!r} strict={self.strict}>"


def render(
    template: str,
    data: Any = None,
    *,
    partials: Mapping[str, str] | Loader | None = None,
    delimiters: tuple[str, str] = ("{{", "}}"),
    functions: Mapping[str, SectionFunction] | None = None,
) -> str:
    """Render a template string against data.

    Args:
        template: Template source
        data: Root data (dict, JSON-like value, object) or a Context
        partials: Partial sources by name, or a loader
        delimiters: Default start/end markers
        functions: Custom section functions

    Raises:
        TemplateRenderError: If the template has an error

    Example:
        >>> render("Hello {{name}}!", {"name": "John"})
        'Hello John!'
    """
    loader = DictLoader(dict(partials)) if isinstance(partials, Mapping) else partials
    env = Environment(loader, delimiters=delimiters, functions=functions)
    return env.render(template, data)
