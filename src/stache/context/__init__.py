"""Context adapters: the data side of a render.

`Context` is the capability interface the renderer talks to; `MappingContext`
and `JsonContext` are the bundled adapters.
"""

from stache.context.base import Context, Loader
from stache.context.json import JsonContext
from stache.context.mapping import MISSING, MappingContext, format_value

__all__ = [
    "MISSING",
    "Context",
    "JsonContext",
    "Loader",
    "MappingContext",
    "format_value",
]
