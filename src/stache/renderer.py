"""Recursive Mustache renderer.

One render of a span is a loop:

    scan next tag -> copy the text before it -> dispatch on its kind ->
    continue after the tag -> stop at "no tag" or at the first error

Sections recurse into their body with the scope pushed on the context.
Partials recurse into the partial's text as a fresh top-level span against
the same context. All recursion shares one `RenderState`, so the first error
stops every enclosing loop.

Errors:
Template problems never raise. They are recorded once (first error wins) and
the output produced so far is returned. Check ``renderer.error`` afterwards:

    ```python
    renderer = Renderer()
    out = renderer.render("{{#a}}x{{/b}}", MappingContext({"a": True}))
    out                       # 'x'
    renderer.error            # 'Tag start/end key mismatch'
    renderer.error_position   # 7
    ```

Delimiters:
Every render and every partial starts with the configured default pair
(``set_delimiters``). ``{{=<% %>=}}`` changes the pair for the rest of the
current template; a partial's changes never leak back to its caller.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import nullcontext

from stache._types import Delimiters, EscapeMode, Tag, TagType
from stache.context.base import Context
from stache.environment.exceptions import ErrorCode, RenderError
from stache.matcher import find_end_tag
from stache.render_state import RenderState
from stache.scanner import find_tag
from stache.utils.html import html_escape, html_unescape

logger = logging.getLogger(__name__)

# Tag kind -> handler method name. Handlers return (text, resume offset).
_TAG_HANDLERS: dict[TagType, str] = {
    TagType.VALUE: "_render_value",
    TagType.SECTION_OPEN: "_render_section",
    TagType.INVERTED_SECTION_OPEN: "_render_inverted_section",
    TagType.PARTIAL: "_render_partial",
    TagType.COMMENT: "_skip_tag",
    TagType.SET_DELIMITER: "_skip_tag",
    TagType.SECTION_CLOSE: "_unexpected_end_tag",
}

_ESCAPERS: dict[EscapeMode, Callable[[str], str]] = {
    EscapeMode.ESCAPE: html_escape,
    EscapeMode.UNESCAPE: html_unescape,
    EscapeMode.RAW: str,
}


def indent_partial(source: str, width: int) -> str:
    """Indent every line of a partial after the first by ``width`` spaces.

    A trailing line terminator gets no indent after it. The first line's
    indent is written by the caller.
    """
    if width <= 0 or not source:
        return source
    pad = " " * width
    return source[:-1].replace("\n", "\n" + pad) + source[-1]


class Renderer:
    """Renders Mustache templates against a `Context`.

    A Renderer keeps per-call state (active delimiters, partial stack,
    recorded error) and resets it at the start of every ``render()``. Use one
    instance per thread.

    Args:
        delimiters: Default start/end markers (``("{{", "}}")``)
        max_partial_depth: Nesting limit for partial expansion

    """

    __slots__ = ("_state",)

    def __init__(
        self,
        delimiters: tuple[str, str] = ("{{", "}}"),
        *,
        max_partial_depth: int = 50,
    ):
        self._state = RenderState(max_partial_depth=max_partial_depth)
        self.set_delimiters(*delimiters)

    # ------------------------------------------------------------------
    # Configuration and error surface
    # ------------------------------------------------------------------

    @property
    def delimiters(self) -> Delimiters:
        """Default delimiters used at the start of renders and partials."""
        return self._state.default_delimiters

    def set_delimiters(self, start: str, end: str) -> None:
        """Set the default start/end markers.

        Raises:
            ValueError: If a marker is empty, contains whitespace or ``=``
        """
        for marker in (start, end):
            if not marker or "=" in marker or any(ch.isspace() for ch in marker):
                raise ValueError(
                    f"Invalid delimiter {marker!r}: must be non-empty, "
                    f"without whitespace or '='"
                )
        pair = Delimiters(start, end)
        self._state.default_delimiters = pair
        self._state.delimiters = pair

    @property
    def last_error(self) -> RenderError | None:
        return self._state.error

    @property
    def error(self) -> str:
        """Message of the last render's error, ``""`` on success."""
        error = self._state.error
        return error.message if error else ""

    @property
    def error_position(self) -> int | None:
        """Offset where the last render's error was recorded."""
        error = self._state.error
        return error.position if error else None

    @property
    def error_partial(self) -> str:
        """Innermost partial active when the error was recorded."""
        error = self._state.error
        return error.partial if error else ""

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render(self, template: str, context: Context) -> str:
        """Render ``template`` against ``context``.

        Resets delimiters, partial stack and error first. Never raises for
        template errors; inspect ``error`` afterwards.
        """
        self._state.reset()
        output = self._render(template, 0, len(template), context)
        if self._state.error is not None:
            logger.debug("Render stopped: %s", self._state.error.message)
        return output

    def render_fragment(self, text: str, context: Context) -> str:
        """Render text from inside a custom section function.

        Unlike ``render()`` this keeps the current error state and partial
        stack. The text starts with the delimiters active at the section and
        any changes it makes are undone afterwards.
        """
        saved = self._state.delimiters
        try:
            return self._render(text, 0, len(text), context)
        finally:
            self._state.delimiters = saved

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def _render(self, content: str, start: int, end: int, context: Context) -> str:
        state = self._state
        buf: list[str] = []
        _append = buf.append
        cursor = start

        while not state.failed:
            tag = find_tag(content, cursor, end, state)
            if tag is None:
                _append(content[cursor:end])
                break

            _append(content[cursor : tag.start])
            handler = getattr(self, _TAG_HANDLERS[tag.kind])
            text, cursor = handler(tag, content, end, context)
            _append(text)

        return "".join(buf)

    # ------------------------------------------------------------------
    # Tag handlers
    # ------------------------------------------------------------------

    def _render_value(
        self, tag: Tag, content: str, limit: int, context: Context
    ) -> tuple[str, int]:
        value = context.string_value(tag.key)
        return _ESCAPERS[tag.escape_mode](value), tag.end

    def _skip_tag(self, tag: Tag, content: str, limit: int, context: Context) -> tuple[str, int]:
        return "", tag.end

    def _unexpected_end_tag(
        self, tag: Tag, content: str, limit: int, context: Context
    ) -> tuple[str, int]:
        self._state.set_error("Unexpected end tag", tag.start, ErrorCode.UNEXPECTED_END_TAG)
        return "", tag.end

    def _match_section(
        self,
        tag: Tag,
        content: str,
        limit: int,
        message: str,
        code: ErrorCode,
    ) -> tuple[int, int, bool] | None:
        """Find where a section's body ends.

        Returns:
            ``(body_end, resume, recovering)`` or None when nothing can be
            rendered. ``recovering`` is set when the close tag had the wrong
            key: the body up to that tag is still rendered for best-effort
            output, under the recorded mismatch.
        """
        state = self._state
        end_tag = find_end_tag(content, tag, limit, state)
        if end_tag is not None:
            return end_tag.start, end_tag.end, False

        error = state.error
        if error is None:
            state.set_error(message, tag.start, code)
            return None
        if error.code is ErrorCode.KEY_MISMATCH:
            return error.position, error.position, True
        return None

    def _render_section(
        self, tag: Tag, content: str, limit: int, context: Context
    ) -> tuple[str, int]:
        state = self._state
        opening = state.delimiters
        match = self._match_section(
            tag,
            content,
            limit,
            "No matching end tag found for section",
            ErrorCode.UNCLOSED_SECTION,
        )
        if match is None:
            return "", tag.end
        body_end, resume, recovering = match
        closing = state.delimiters

        buf: list[str] = []
        with state.held_error() if recovering else nullcontext():
            count = context.list_count(tag.key)
            if count > 0:
                for index in range(count):
                    state.delimiters = opening
                    context.push(tag.key, index)
                    try:
                        buf.append(self._render(content, tag.end, body_end, context))
                    finally:
                        context.pop()
                    if state.failed:
                        break
            elif context.can_eval(tag.key):
                state.delimiters = opening
                buf.append(context.evaluate(tag.key, content[tag.end : body_end], self))
            elif not context.is_false(tag.key):
                state.delimiters = opening
                context.push(tag.key)
                try:
                    buf.append(self._render(content, tag.end, body_end, context))
                finally:
                    context.pop()

        state.delimiters = closing
        return "".join(buf), resume

    def _render_inverted_section(
        self, tag: Tag, content: str, limit: int, context: Context
    ) -> tuple[str, int]:
        state = self._state
        opening = state.delimiters
        match = self._match_section(
            tag,
            content,
            limit,
            "No matching end tag found for inverted section",
            ErrorCode.UNCLOSED_INVERTED_SECTION,
        )
        if match is None:
            return "", tag.end
        body_end, resume, recovering = match
        closing = state.delimiters

        text = ""
        with state.held_error() if recovering else nullcontext():
            if context.is_false(tag.key):
                state.delimiters = opening
                text = self._render(content, tag.end, body_end, context)

        state.delimiters = closing
        return text, resume

    def _render_partial(
        self, tag: Tag, content: str, limit: int, context: Context
    ) -> tuple[str, int]:
        state = self._state
        if len(state.partial_stack) >= state.max_partial_depth:
            state.set_error(
                f"Maximum partial depth exceeded ({state.max_partial_depth}) "
                f"when including '{tag.key}'",
                tag.start,
                ErrorCode.PARTIAL_DEPTH,
            )
            return "", tag.end

        with state.partial_scope(tag.key):
            source = context.partial_value(tag.key)
            if tag.indentation > 0:
                text = " " * tag.indentation + self._render_source(
                    indent_partial(source, tag.indentation), context
                )
            else:
                text = self._render_source(source, context)
        return text, tag.end

    def _render_source(self, source: str, context: Context) -> str:
        return self._render(source, 0, len(source), context)

    def __repr__(self) -> str:
        start, end = self._state.default_delimiters
        return f"<Renderer delimiters={start!r} {end!r}>"
