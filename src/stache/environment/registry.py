"""Custom section function registry.

A custom function turns ``{{#name}}...{{/name}}`` into a call instead of a
data lookup. It receives the section's unrendered text, the renderer and the
context, and returns the text to emit:

    ```python
    def upper(text, renderer, context):
        return renderer.render_fragment(text, context).upper()

    env.functions["UPPER"] = upper
    env.render("Hello {{#UPPER}}{{name}}{{/UPPER}}!", {"name": "John"})
    # 'Hello JOHN!'
    ```

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stache.context.base import Context
    from stache.renderer import Renderer

SectionFunction = Callable[[str, "Renderer", "Context"], str]


class FunctionRegistry:
    """Dict-like registry of custom section functions.

    Supports:
        - registry['name'] = func
        - registry.update({'name': func})
        - func = registry['name']
        - 'name' in registry

    Mutations replace the underlying dict (copy-on-write), so a context
    holding the registry never sees a half-applied update.
    """

    __slots__ = ("_functions",)

    def __init__(self, functions: Mapping[str, SectionFunction] | None = None):
        self._functions: dict[str, SectionFunction] = dict(functions or {})

    def __getitem__(self, name: str) -> SectionFunction:
        return self._functions[name]

    def __setitem__(self, name: str, func: SectionFunction) -> None:
        if not callable(func):
            raise TypeError(
                f"Section function '{name}' must be callable, got {type(func).__name__}"
            )
        new = self._functions.copy()
        new[name] = func
        self._functions = new

    def __delitem__(self, name: str) -> None:
        new = self._functions.copy()
        del new[name]
        self._functions = new

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def get(self, name: str, default: SectionFunction | None = None) -> SectionFunction | None:
        return self._functions.get(name, default)

    def register(self, name: str) -> Callable[[SectionFunction], SectionFunction]:
        """Decorator form of ``registry[name] = func``."""

        def decorator(func: SectionFunction) -> SectionFunction:
            self[name] = func
            return func

        return decorator

    def update(self, mapping: Mapping[str, SectionFunction]) -> None:
        """Batch update functions."""
        for name, func in mapping.items():
            if not callable(func):
                raise TypeError(
                    f"Section function '{name}' must be callable, got {type(func).__name__}"
                )
        new = self._functions.copy()
        new.update(mapping)
        self._functions = new

    def copy(self) -> FunctionRegistry:
        return FunctionRegistry(self._functions)

    def keys(self):
        return self._functions.keys()

    def items(self):
        return self._functions.items()
