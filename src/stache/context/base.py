"""Context capability interface consumed by the renderer.

The renderer never looks inside the data it renders. Everything it needs is
asked through a `Context`:

    string_value(key)    text for ``{{key}}``
    is_false(key)        visibility of ``{{^key}}`` and non-list ``{{#key}}``
    list_count(key)      iteration count for ``{{#key}}``
    push(key, index)     enter a section scope
    pop()                leave it
    can_eval(key)        is ``{{#key}}`` a custom function?
    evaluate(...)        run it on the section's unrendered text
    partial_value(key)   template text for ``{{>key}}``

Concrete adapters (`MappingContext`, `JsonContext`) keep a stack of scope
frames and implement the lookups; custom functions and partial loading are
optional extras with working defaults.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

from stache.environment.exceptions import TemplateNotFoundError

if TYPE_CHECKING:
    from stache.renderer import Renderer

logger = logging.getLogger(__name__)


class Loader(Protocol):
    """Anything that can supply template source by name.

    Loaders raise `TemplateNotFoundError` for unknown names.
    """

    def get_source(self, name: str) -> tuple[str, str | None]: ...


class Context(ABC):
    """Scope stack and lookups for one render.

    A context is owned by a single render call and must not be shared by
    concurrent renders: push/pop mutate it.

    Args:
        loader: Optional partial loader. Without one every partial is empty.
    """

    def __init__(self, loader: Loader | None = None):
        self._loader = loader

    @property
    def loader(self) -> Loader | None:
        return self._loader

    @abstractmethod
    def string_value(self, key: str) -> str:
        """Text for a value tag; ``""`` when unresolved or null."""

    @abstractmethod
    def is_false(self, key: str) -> bool:
        """Whether the value counts as absent for section visibility."""

    @abstractmethod
    def list_count(self, key: str) -> int:
        """Number of elements when the value is a list, else 0."""

    @abstractmethod
    def push(self, key: str, index: int | None = None) -> None:
        """Push the value (or its ``index``-th element) as the new top frame."""

    @abstractmethod
    def pop(self) -> None:
        """Drop the top frame; the root frame is never removed."""

    def can_eval(self, key: str) -> bool:
        """Whether ``{{#key}}`` is a custom function. No functions by default."""
        return False

    def evaluate(self, key: str, text: str, renderer: Renderer) -> str:
        """Run the custom function for ``key`` on the unrendered section text."""
        return ""

    def partial_value(self, key: str) -> str:
        """Raw template text for a partial, ``""`` when it cannot be found."""
        if self._loader is None:
            return ""
        try:
            source, _filename = self._loader.get_source(key)
        except TemplateNotFoundError:
            logger.debug("Partial '%s' not found, rendering as empty", key)
            return ""
        return source
