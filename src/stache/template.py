"""Template: source text bound to an Environment.

Templates are immutable. Each ``render()`` builds its own Renderer and
Context, so a template can be rendered from several threads at once.

Error Policy:
``render_result()`` never raises and returns the output together with the
recorded error. ``render()`` raises `TemplateRenderError` for strict
environments (the default) and otherwise logs a warning and returns the
best-effort output:

    ```
    TemplateRenderError: Render Error: Tag start/end key mismatch
      Location: page.mustache:1:7
       |
    >  1 | {{#a}}x{{/b}}
       |          ^
       |
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stache.environment.exceptions import RenderError, TemplateRenderError

if TYPE_CHECKING:
    from stache.context.base import Context
    from stache.environment.core import Environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Output of one render plus the error it recorded, if any."""

    output: str
    error: RenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        return self.output


class Template:
    """Template source ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        filename: Source file path, when loaded from disk
        source: Template text

    Example:
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{name}}!")
            >>> t.render(name="World")
            'Hello, World!'
            >>> t.render({"name": "World"})
            'Hello, World!'

    """

    __slots__ = ("_env", "_filename", "_name", "_source")

    def __init__(
        self,
        env: Environment,
        source: str,
        name: str | None = None,
        filename: str | None = None,
    ):
        self._env = env
        self._source = source
        self._name = name
        self._filename = filename

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def source(self) -> str:
        return self._source

    def _context(self, data: Any, kwargs: dict[str, Any]) -> Context:
        if kwargs:
            if data is None:
                data = kwargs
            elif isinstance(data, Mapping):
                data = {**data, **kwargs}
            else:
                raise TypeError(
                    "Keyword arguments can only be combined with mapping data, "
                    f"got {type(data).__name__}"
                )
        return self._env.make_context(data)

    def render_result(self, data: Any = None, **kwargs: Any) -> RenderResult:
        """Render and return output plus any recorded error. Never raises
        for template errors."""
        context = self._context(data, kwargs)
        renderer = self._env.make_renderer()
        output = renderer.render(self._source, context)
        return RenderResult(output=output, error=renderer.last_error)

    def render(self, data: Any = None, **kwargs: Any) -> str:
        """Render the template.

        Args:
            data: Root data (dict, JSON-like value, object) or a Context
            **kwargs: Extra top-level names, merged over mapping data

        Raises:
            TemplateRenderError: If the render recorded an error and the
                environment is strict
        """
        result = self.render_result(data, **kwargs)
        if result.error is None:
            return result.output

        exc = TemplateRenderError(
            result.error,
            output=result.output,
            template_name=self._filename or self._name,
            source=self._source,
        )
        if self._env.strict:
            raise exc
        logger.warning("%s", exc.format_compact())
        return result.output

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
