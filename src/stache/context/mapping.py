"""Context over plain Python data: dicts, lists, scalars and objects.

Lookup walks the scope stack from the innermost frame outwards and returns
the first frame that has the key, so inner sections shadow outer names:

    ```python
    ctx = MappingContext({"name": "outer", "user": {"name": "inner"}})
    ctx.string_value("name")   # 'outer'
    ctx.push("user")
    ctx.string_value("name")   # 'inner'
    ctx.string_value(".")      # '' (a dict has no text form)
    ```

Dotted names (``user.name``) resolve the first part through the walk and the
rest by descending into that value. Mappings are looked up by key, other
objects by public attribute.

Value Formatting:
    None / unresolved       ''
    bool                    'true' / 'false'
    int                     decimal text
    float                   integral -> no decimals ('30'), otherwise up to
                            6 significant digits ('123.456', '0.333333')
    str                     as-is
    mapping / list / callable   ''
    other objects           str(value)

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from stache.context.base import Context, Loader
from stache.environment.registry import FunctionRegistry, SectionFunction

if TYPE_CHECKING:
    from stache.renderer import Renderer


class _Missing:
    """Sentinel for keys that resolve nowhere."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

_TEXT_TYPES = (str, bytes, bytearray)


def is_list(value: Any) -> bool:
    """Lists and tuples iterate; strings and bytes do not."""
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def get_member(obj: Any, name: str) -> Any:
    """Look ``name`` up on one frame, returning MISSING when absent."""
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    if obj is None or isinstance(obj, (bool, int, float, Sequence)) or obj is MISSING:
        return MISSING
    if not name or name.startswith("_"):
        return MISSING
    return getattr(obj, name, MISSING)


def format_value(value: Any) -> str:
    """Text form of a resolved value (see module docstring)."""
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return f"{value:.0f}"
        return f"{value:g}"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, Sequence)) or callable(value):
        return ""
    return str(value)


class MappingContext(Context):
    """Context over a tree of Python values.

    Args:
        data: Root frame, usually a dict. None means an empty root.
        loader: Optional partial loader
        functions: Custom section functions, a mapping or FunctionRegistry.
            Callable values found in the data act as functions too. The
            registry is copied, so `register_function` stays local.

    Example:
        >>> from stache import Renderer, MappingContext
        >>> ctx = MappingContext({"items": [{"name": "Item1"}, {"name": "Item2"}]})
        >>> Renderer().render("{{#items}}- {{name}}\\n{{/items}}", ctx)
        '- Item1\\n- Item2\\n'
    """

    def __init__(
        self,
        data: Any = None,
        loader: Loader | None = None,
        functions: FunctionRegistry | Mapping[str, SectionFunction] | None = None,
    ):
        super().__init__(loader)
        self._stack: list[Any] = [{} if data is None else data]
        if isinstance(functions, FunctionRegistry):
            self._functions = functions.copy()
        else:
            self._functions = FunctionRegistry(functions)

    @property
    def depth(self) -> int:
        """Number of frames on the scope stack (1 = root only)."""
        return len(self._stack)

    @property
    def top(self) -> Any:
        return self._stack[-1]

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    def register_function(self, name: str, func: SectionFunction) -> None:
        self._functions[name] = func

    def lookup(self, key: str) -> Any:
        """Resolve ``key`` through the scope stack; MISSING when unresolved."""
        if key == ".":
            return self._stack[-1]

        head, _, rest = key.partition(".")
        for frame in reversed(self._stack):
            value = get_member(frame, head)
            if value is not MISSING:
                break
        else:
            return MISSING

        if rest:
            for part in rest.split("."):
                value = get_member(value, part)
                if value is MISSING:
                    return MISSING
        return value

    def string_value(self, key: str) -> str:
        return format_value(self.lookup(key))

    def is_false(self, key: str) -> bool:
        value = self.lookup(key)
        if value is MISSING or value is None:
            return True
        if isinstance(value, bool):
            return not value
        if isinstance(value, str):
            return not value or value.lower() == "false"
        return False

    def list_count(self, key: str) -> int:
        value = self.lookup(key)
        return len(value) if is_list(value) else 0

    def push(self, key: str, index: int | None = None) -> None:
        value = self.lookup(key)
        if value is MISSING or value is None:
            frame = None
        elif index is not None and is_list(value):
            frame = value[index] if 0 <= index < len(value) else None
        else:
            frame = value
        self._stack.append(frame)

    def pop(self) -> None:
        if len(self._stack) > 1:
            self._stack.pop()

    def _function_for(self, key: str) -> SectionFunction | None:
        func = self._functions.get(key)
        if func is not None:
            return func
        value = self.lookup(key)
        if value is not MISSING and callable(value) and not isinstance(value, type):
            return value
        return None

    def can_eval(self, key: str) -> bool:
        return self._function_for(key) is not None

    def evaluate(self, key: str, text: str, renderer: Renderer) -> str:
        func = self._function_for(key)
        if func is None:
            return ""
        result = func(text, renderer, self)
        return "" if result is None else str(result)

    def __repr__(self) -> str:
        return f"<MappingContext depth={len(self._stack)}>"
