"""Tag scanner for Mustache templates.

Finds the next tag in a span of template text, classifies it by its sigil and
widens structural tags over a standalone line.

Scanning works on offsets into the original template string rather than on
copies, so nested sections cost nothing beyond the offsets themselves.

Classification (first non-whitespace character inside the delimiters):

    ``#``  section open            ``^``  inverted section open
    ``/``  section close           ``!``  comment
    ``>``  partial                 ``=``  set delimiter
    ``&``  value, unescaped        ``{``  value, raw
    other  value, HTML-escaped

Standalone lines:
A structural tag alone on its line (only whitespace around it) swallows the
line's indentation and its line terminator, so block tags do not leave blank
lines behind. Value tags are never widened.

Unterminated tags:
A start marker without a matching end marker is not an error. The scanner
reports "no tag" and the rest of the span is copied as text.

"""

from __future__ import annotations

import re
from dataclasses import replace

from stache._types import Delimiters, EscapeMode, Tag, TagType
from stache.environment.exceptions import ErrorCode
from stache.render_state import RenderState

_SIGILS: dict[str, TagType] = {
    "#": TagType.SECTION_OPEN,
    "^": TagType.INVERTED_SECTION_OPEN,
    "/": TagType.SECTION_CLOSE,
    "!": TagType.COMMENT,
    ">": TagType.PARTIAL,
    "=": TagType.SET_DELIMITER,
}

_TOKEN = re.compile(r"\S+")


def find_tag(content: str, start: int, limit: int, state: RenderState) -> Tag | None:
    """Find the first tag starting in ``[start, limit)``.

    Uses the active delimiters from ``state``. A set-delimiter tag switches
    ``state.delimiters`` as soon as it is scanned.

    Args:
        content: Full template text the offsets refer to
        start: Offset to start searching from
        limit: Tags must start before this offset
        state: Render state (active delimiters, error sink)

    Returns:
        The tag, or None when no complete tag starts in the span
    """
    open_marker, close_marker = state.delimiters

    tag_start = content.find(open_marker, start)
    if tag_start == -1 or tag_start >= limit:
        return None

    inner_start = tag_start + len(open_marker)
    inner_end = content.find(close_marker, inner_start)
    if inner_end == -1:
        return None
    tag_end = inner_end + len(close_marker)

    pos = _skip_whitespace(content, inner_start, inner_end)
    sigil = content[pos] if pos < inner_end else ""

    kind = _SIGILS.get(sigil)
    if kind is None:
        return _value_tag(content, tag_start, tag_end, pos, inner_end, sigil)

    if kind is TagType.COMMENT:
        key = ""
    elif kind is TagType.SET_DELIMITER:
        key = ""
        _set_delimiters(content, pos + 1, inner_end, tag_start, state)
    else:
        key = content[pos + 1 : inner_end].strip()

    return widen_standalone(Tag(kind=kind, key=key, start=tag_start, end=tag_end), content)


def _value_tag(
    content: str,
    tag_start: int,
    tag_end: int,
    pos: int,
    inner_end: int,
    sigil: str,
) -> Tag:
    if sigil == "&":
        return Tag(
            kind=TagType.VALUE,
            key=content[pos + 1 : inner_end].strip(),
            start=tag_start,
            end=tag_end,
            escape_mode=EscapeMode.UNESCAPE,
        )

    if sigil == "{":
        key_start = pos + 1
        key_end = inner_end
        brace = content.find("}", key_start, inner_end + 1)
        if brace == -1 or brace == inner_end:
            # {{{name}}}: the end marker was matched one brace early
            tag_end = min(tag_end + 1, len(content))
        else:
            key_end = brace
        return Tag(
            kind=TagType.VALUE,
            key=content[key_start:key_end].strip(),
            start=tag_start,
            end=tag_end,
            escape_mode=EscapeMode.RAW,
        )

    return Tag(
        kind=TagType.VALUE,
        key=content[pos:inner_end].strip(),
        start=tag_start,
        end=tag_end,
    )


def _skip_whitespace(content: str, pos: int, end: int) -> int:
    while pos < end and content[pos].isspace():
        pos += 1
    return pos


def _set_delimiters(
    content: str,
    body_start: int,
    body_end: int,
    tag_start: int,
    state: RenderState,
) -> None:
    """Parse ``{{=<start> <end>=}}`` and switch the active delimiters.

    The body is the text between the ``=`` sigil and the end marker; its
    closing ``=`` is dropped before splitting into tokens.
    """
    body = content[body_start:body_end].rstrip()
    if body.endswith("="):
        body = body[:-1]

    tokens = list(_TOKEN.finditer(body))
    for token in tokens:
        equals = token.group().find("=")
        if equals != -1:
            state.set_error(
                "Custom delimiters may not contain '='",
                body_start + token.start() + equals,
                ErrorCode.DELIMITER_CONTAINS_EQUALS,
            )
            return

    if len(tokens) != 2:
        state.set_error(
            "Invalid set delimiter tag: expected a start and an end marker",
            tag_start,
            ErrorCode.INVALID_DELIMITER,
        )
        return

    state.delimiters = Delimiters(tokens[0].group(), tokens[1].group())


def widen_standalone(tag: Tag, content: str) -> Tag:
    """Extend a structural tag over its line when the line holds nothing else.

    Scans back to the start of the line and forward through the line
    terminator (or the end of the text). Any non-whitespace character on
    either side leaves the tag unchanged. The number of whitespace characters
    removed before the tag becomes ``indentation``.

    Example:
        ``"A\\n  {{#x}}\\nB"``: the ``{{#x}}`` tag grows to cover
        ``"  {{#x}}\\n"`` with indentation 2.
    """
    start = tag.start
    indentation = 0
    while start > 0 and content[start - 1] != "\n":
        start -= 1
        if not content[start].isspace():
            return tag
        indentation += 1

    end = tag.end
    length = len(content)
    while end < length and content[end - 1] != "\n":
        if not content[end].isspace():
            return tag
        end += 1

    return replace(tag, start=start, end=end, indentation=indentation)
