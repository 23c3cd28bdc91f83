"""Context over JSON documents.

Accepts JSON text (``str``/``bytes``) or an already-parsed value. JSON maps
directly onto the Python types `MappingContext` understands: objects become
dicts, arrays lists, numbers int/float, ``true``/``false`` bools and ``null``
None.

    ```python
    ctx = JsonContext('{"name": "John", "age": 30, "ratio": 0.5}')
    Renderer().render("{{name}} is {{age}} ({{ratio}})", ctx)
    # 'John is 30 (0.5)'
    ```

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stache.context.base import Loader
from stache.context.mapping import MappingContext
from stache.environment.registry import FunctionRegistry, SectionFunction


class JsonContext(MappingContext):
    """MappingContext whose root comes from JSON.

    Args:
        source: JSON text, or a parsed JSON value
        loader: Optional partial loader
        functions: Custom section functions

    Raises:
        json.JSONDecodeError: If ``source`` is text that is not valid JSON
    """

    def __init__(
        self,
        source: str | bytes | bytearray | Any,
        loader: Loader | None = None,
        functions: FunctionRegistry | Mapping[str, SectionFunction] | None = None,
    ):
        if isinstance(source, (str, bytes, bytearray)):
            source = json.loads(source)
        super().__init__(source, loader=loader, functions=functions)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        loader: Loader | None = None,
        functions: FunctionRegistry | Mapping[str, SectionFunction] | None = None,
        encoding: str = "utf-8",
    ) -> JsonContext:
        """Load the root frame from a JSON file."""
        return cls(Path(path).read_text(encoding), loader=loader, functions=functions)

    def __repr__(self) -> str:
        return f"<JsonContext depth={self.depth}>"
