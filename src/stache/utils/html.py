"""HTML escaping for value tags.

``{{name}}`` encodes the four characters Mustache escapes (``&``, ``<``,
``>``, ``"``). Apostrophes are left alone. ``{{&name}}`` decodes the same four
entities.

"""

from __future__ import annotations

# Single-pass escaping via str.translate()
_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
)

# &amp; must come last so "&amp;lt;" decodes to "&lt;", not "<"
_UNESCAPE_SEQUENCE: tuple[tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)


def html_escape(value: str) -> str:
    """Entity-encode ``& < > "``.

    Example:
        >>> html_escape('<a href="x">&</a>')
        '&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;'
    """
    return value.translate(_ESCAPE_TABLE)


def html_unescape(value: str) -> str:
    """Decode ``&lt; &gt; &quot; &amp;``; other entities are left untouched.

    Inverse of `html_escape`: ``html_unescape(html_escape(s)) == s``.
    """
    if "&" not in value:
        return value
    for entity, char in _UNESCAPE_SEQUENCE:
        value = value.replace(entity, char)
    return value
