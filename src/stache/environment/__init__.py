"""Environment, loaders, function registry and exceptions.

Import order matters: exceptions and loaders first, since the renderer and
contexts depend on them and `core` depends on the renderer.
"""

from stache.environment.exceptions import (
    ErrorCode,
    RenderError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRenderError,
    build_source_snippet,
)
from stache.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
)
from stache.environment.registry import FunctionRegistry, SectionFunction
from stache.environment.core import Environment, render  # noqa: I001

__all__ = [
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "FunctionRegistry",
    "RenderError",
    "SectionFunction",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "build_source_snippet",
    "render",
]
