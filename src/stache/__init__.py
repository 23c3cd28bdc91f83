"""stache: Mustache templates for Python.

A small, exact Mustache renderer: variables, sections, inverted sections,
partials, comments, custom delimiters and HTML escaping, rendered against a
stack of data scopes.

Quickstart:
    >>> import stache
    >>> stache.render("Hello {{name}}!", {"name": "John"})
    'Hello John!'

Partials from disk:
    >>> from stache import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> env.get_template("page").render(page=page)

Architecture:
Template text → Scanner → Renderer (→ Section Matcher) → output

1. **Scanner**: finds the next tag with the active delimiters, classifies it
   and widens structural tags over standalone lines
2. **Section Matcher**: finds the close tag for a section by depth counting
3. **Renderer**: dispatches on tag kind, recurses into section bodies and
   partials, escapes values, re-indents partials
4. **Context**: answers lookups against the data (`MappingContext`,
   `JsonContext`, or your own `Context` subclass)

There is no compile step: templates are scanned as they render, using
offsets into the source rather than copies.

Errors:
The renderer records the first template error instead of raising and returns
the output produced so far. `Template.render` raises `TemplateRenderError`
for strict environments (the default); `Template.render_result` never raises.

"""

from stache._types import DEFAULT_DELIMITERS, Delimiters, EscapeMode, Tag, TagType
from stache.environment import (
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    FunctionRegistry,
    RenderError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRenderError,
    build_source_snippet,
    render,
)
from stache.context import Context, JsonContext, MappingContext
from stache.renderer import Renderer
from stache.template import RenderResult, Template
from stache.utils.html import html_escape, html_unescape

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_DELIMITERS",
    "ChoiceLoader",
    "Context",
    "Delimiters",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "EscapeMode",
    "FileSystemLoader",
    "FunctionLoader",
    "FunctionRegistry",
    "JsonContext",
    "MappingContext",
    "RenderError",
    "RenderResult",
    "Renderer",
    "SourceSnippet",
    "Tag",
    "TagType",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "__version__",
    "build_source_snippet",
    "html_escape",
    "html_unescape",
    "render",
]
