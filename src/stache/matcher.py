"""Section matcher: finds the close tag that ends a section.

Sections of either flavour nest, so ``{{#a}}{{^b}}{{/b}}{{/a}}`` is matched
by counting opens and closes rather than by looking for ``{{/a}}``. The first
close tag that brings the depth back to zero must carry the opening key.

Set-delimiter tags met while matching take effect immediately and stay in
effect after the section, since delimiters are not section-scoped.

"""

from __future__ import annotations

from stache._types import SECTION_OPENERS, Tag, TagType
from stache.environment.exceptions import ErrorCode
from stache.render_state import RenderState
from stache.scanner import find_tag


def find_end_tag(content: str, open_tag: Tag, limit: int, state: RenderState) -> Tag | None:
    """Find the close tag matching ``open_tag`` before ``limit``.

    Returns:
        The matching close tag, or None. A close tag with the wrong key
        records "Tag start/end key mismatch" at its position. Running out of
        tags records nothing; the caller reports the missing close tag.
    """
    depth = 1
    cursor = open_tag.end

    while not state.failed:
        tag = find_tag(content, cursor, limit, state)
        if tag is None:
            return None

        if tag.kind in SECTION_OPENERS:
            depth += 1
        elif tag.kind is TagType.SECTION_CLOSE:
            depth -= 1
            if depth == 0:
                if tag.key != open_tag.key:
                    state.set_error("Tag start/end key mismatch", tag.start, ErrorCode.KEY_MISMATCH)
                    return None
                return tag

        cursor = tag.end

    return None
