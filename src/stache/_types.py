"""Tag and delimiter types produced by the scanner.

A `Tag` describes one tag occurrence in the template text. Tags are
transient: the scanner builds one, the renderer dispatches on it once and
moves on. Spans are offsets into the original template string, so nested
sections never copy their bodies.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class TagType(Enum):
    """Kinds of Mustache tags."""

    VALUE = "value"
    SECTION_OPEN = "section_open"
    INVERTED_SECTION_OPEN = "inverted_section_open"
    SECTION_CLOSE = "section_close"
    PARTIAL = "partial"
    COMMENT = "comment"
    SET_DELIMITER = "set_delimiter"


class EscapeMode(Enum):
    """How a value tag's text is written to the output.

    ESCAPE: ``{{name}}`` entity-encodes ``& < > "``
    UNESCAPE: ``{{&name}}`` decodes those four entities
    RAW: ``{{{name}}}`` writes the value as-is
    """

    ESCAPE = "escape"
    UNESCAPE = "unescape"
    RAW = "raw"


class Delimiters(NamedTuple):
    """Start/end marker pair for tags."""

    start: str
    end: str


DEFAULT_DELIMITERS = Delimiters("{{", "}}")

# Tags that open a nested section (depth +1 while matching)
SECTION_OPENERS = frozenset({TagType.SECTION_OPEN, TagType.INVERTED_SECTION_OPEN})


@dataclass(frozen=True, slots=True)
class Tag:
    """One tag occurrence found by the scanner.

    Attributes:
        kind: Tag type
        key: Trimmed tag name; empty for comments and set-delimiter tags
        start: Offset of the first character the tag occupies
        end: Offset just past the tag. Structural tags on a standalone
            line also cover the line's indentation and line terminator.
        escape_mode: Output escaping, only meaningful for VALUE tags
        indentation: Whitespace characters removed before a standalone tag

    """

    kind: TagType
    key: str
    start: int
    end: int
    escape_mode: EscapeMode = EscapeMode.ESCAPE
    indentation: int = 0
