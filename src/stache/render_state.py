"""Per-render mutable state shared by the scanner, matcher and renderer.

One `RenderState` belongs to one `Renderer` and is reset at the top of every
``Renderer.render()`` call. It holds everything the recursive render needs
to share across frames:

    - the configured default delimiters and the currently active pair
    - the partial-call stack (for error attribution and depth limiting)
    - the single recorded `RenderError`

Nothing here is module-level, so separate Renderer instances never see each
other's delimiters or errors.

"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from stache._types import DEFAULT_DELIMITERS, Delimiters
from stache.environment.exceptions import ErrorCode, RenderError

logger = logging.getLogger(__name__)


@dataclass
class RenderState:
    """Delimiters, partial stack and error for one render call.

    Attributes:
        default_delimiters: Pair every top-level render and partial starts with
        delimiters: Pair currently used by the scanner
        partial_stack: Names of partials being expanded, innermost last
        max_partial_depth: Nesting limit for partials (circular partials)
        error: First error recorded during the render, if any
    """

    default_delimiters: Delimiters = DEFAULT_DELIMITERS
    delimiters: Delimiters = DEFAULT_DELIMITERS

    # 50 is deep enough for any real partial hierarchy while catching
    # recursive partials long before the interpreter's recursion limit.
    max_partial_depth: int = 50
    partial_stack: list[str] = field(default_factory=list)

    error: RenderError | None = None

    def reset(self) -> None:
        """Prepare for a new top-level render."""
        self.delimiters = self.default_delimiters
        self.partial_stack.clear()
        self.error = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def current_partial(self) -> str:
        return self.partial_stack[-1] if self.partial_stack else ""

    def set_error(self, message: str, position: int, code: ErrorCode | None = None) -> None:
        """Record an error unless one is already recorded.

        The innermost active partial is captured for attribution.
        """
        if self.error is not None:
            return
        self.error = RenderError(
            message=message,
            position=position,
            partial=self.current_partial,
            code=code,
        )
        logger.debug(
            "Render error %s at %d%s",
            message,
            position,
            f" in partial '{self.current_partial}'" if self.partial_stack else "",
        )

    @contextmanager
    def held_error(self) -> Iterator[RenderError | None]:
        """Temporarily clear the recorded error, restoring it on exit.

        Used to render best-effort output up to an error that was detected
        ahead of the render cursor. The held error still wins over anything
        recorded inside the block.
        """
        held = self.error
        self.error = None
        try:
            yield held
        finally:
            if held is not None:
                self.error = held

    @contextmanager
    def partial_scope(self, name: str) -> Iterator[None]:
        """Isolate delimiters and track the partial for one expansion.

        The partial starts from the default delimiters; the caller's active
        pair is restored afterwards, including on error paths.
        """
        saved = self.delimiters
        self.delimiters = self.default_delimiters
        self.partial_stack.append(name)
        try:
            yield
        finally:
            self.partial_stack.pop()
            self.delimiters = saved
