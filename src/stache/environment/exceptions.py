"""Exceptions and error records for stache.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template or partial not found by a loader
└── TemplateRenderError       # Render finished with a recorded RenderError

The renderer itself never raises for template problems. It records a single
`RenderError` (first error wins) and stops scanning; callers inspect it after
the call returns. `Template.render` turns that record into a
`TemplateRenderError` when the environment is strict.

Error Messages:
    ```
    S-SEC-003: Tag start/end key mismatch
      Location: page.mustache:3:23
       |
       2 | <ul>
    >  3 | {{#items}}<li>{{.}}</li>{{/item}}
       |                          ^
       |
      Docs: https://stache.readthedocs.io/en/latest/errors.html#s-sec-003
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stache.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_STACHE_DOCS_BASE = "https://stache.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes for stache render errors.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: SCN (scanner), SEC (sections), PAR (partials), TPL (templates)
    """

    # Scanner errors (S-SCN-xxx)
    DELIMITER_CONTAINS_EQUALS = "S-SCN-001"
    INVALID_DELIMITER = "S-SCN-002"

    # Section errors (S-SEC-xxx)
    UNCLOSED_SECTION = "S-SEC-001"
    UNCLOSED_INVERTED_SECTION = "S-SEC-002"
    KEY_MISMATCH = "S-SEC-003"
    UNEXPECTED_END_TAG = "S-SEC-004"

    # Partial errors (S-PAR-xxx)
    PARTIAL_DEPTH = "S-PAR-001"

    # Template loading errors (S-TPL-xxx)
    TEMPLATE_NOT_FOUND = "S-TPL-001"
    RENDER_FAILED = "S-TPL-002"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_STACHE_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'scanner', 'section', 'partial', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "SCN": "scanner",
            "SEC": "section",
            "PAR": "partial",
            "TPL": "template",
        }.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class RenderError:
    """Error recorded during one render call.

    Attributes:
        message: Human-readable description
        position: Character offset in the content being scanned when the
            error was recorded (the partial's own text for partial errors)
        partial: Innermost partial being expanded, ``""`` for the top-level
            template
        code: Searchable error code

    """

    message: str
    position: int
    partial: str = ""
    code: ErrorCode | None = None


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def line_and_column(source: str, position: int) -> tuple[int, int]:
    """Convert a character offset to a 1-based line and 0-based column.

    Example:
        >>> line_and_column("ab\\ncd", 4)
        (2, 1)
    """
    position = max(0, min(position, len(source)))
    lineno = source.count("\n", 0, position) + 1
    column = position - (source.rfind("\n", 0, position) + 1)
    return lineno, column


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """A few numbered template lines around a render error.

    Attributes:
        lines: ``(lineno, text)`` pairs, 1-based, in order
        error_line: Line the error points at
        column: 0-based column for the caret, if known
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Gutter-numbered lines with ``>`` and a caret on the error line."""
        rule = terminal.style("dim", "   |")
        parts = [rule]
        for lineno, text in self.lines:
            on_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, text, is_error=on_error))
            if on_error and self.column is not None:
                parts.append(terminal.format_caret(self.column))
        parts.append(rule)
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Cut ``context_lines`` lines either side of ``error_line`` out of ``source``."""
    source_lines = source.splitlines()
    first = max(1, error_line - context_lines)
    last = min(len(source_lines), error_line + context_lines)
    window = tuple((n, source_lines[n - 1]) for n in range(first, last + 1))
    return SourceSnippet(lines=window, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all stache template errors.

        >>> try:
        ...     template.render(data)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short summary with its docs link."""
        parts: list[str] = []
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts.append(header)
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class TemplateNotFoundError(TemplateError):
    """Template or partial not found by any configured loader.

    Loaders raise it from ``get_source()``. Contexts treat it as an empty
    partial; `Environment.get_template` lets it propagate.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateRenderError(TemplateError):
    """A render finished with a recorded error.

    Carries the best-effort output produced before the error along with the
    `RenderError` record. When the error happened in the top-level template
    and its source is known, the message includes a source snippet.

    Attributes:
        error: The recorded RenderError
        output: Output produced before scanning stopped
        template_name: Name of the template being rendered
        lineno: 1-based line of the error (top-level template only)
        col_offset: 0-based column of the error (top-level template only)
    """

    def __init__(
        self,
        error: RenderError,
        *,
        output: str = "",
        template_name: str | None = None,
        source: str | None = None,
    ):
        self.error = error
        self.output = output
        self.template_name = template_name
        self.code = error.code or ErrorCode.RENDER_FAILED
        self.lineno: int | None = None
        self.col_offset: int | None = None
        self.source_snippet: SourceSnippet | None = None
        if source is not None and not error.partial:
            self.lineno, self.col_offset = line_and_column(source, error.position)
            self.source_snippet = build_source_snippet(
                source, self.lineno, column=self.col_offset
            )
        super().__init__(self._format_message())

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def position(self) -> int:
        return self.error.position

    @property
    def partial(self) -> str:
        return self.error.partial

    def _location(self) -> str:
        if self.error.partial:
            return f"partial '{self.error.partial}' at offset {self.error.position}"
        loc = self.template_name or "<template>"
        if self.lineno is not None:
            return f"{loc}:{self.lineno}:{self.col_offset}"
        return f"{loc} at offset {self.error.position}"

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.error.message}"]
        parts.append(f"  Location: {terminal.style('location', self._location())}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format render error as structured terminal diagnostic."""
        parts = [
            terminal.format_error_header(self.code.value, self.error.message),
            f"  Location: {terminal.style('location', self._location())}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        docs = terminal.style("docs_url", self.code.docs_url)
        parts.append(f"  {terminal.style('dim', 'Docs:')} {docs}")
        return "\n".join(parts)
