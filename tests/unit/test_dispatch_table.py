"""Tests for the tag dispatch tables in the renderer.

Every tag kind the scanner can produce must have a handler, and every
escape mode a value tag can carry must have an escaper.
"""

import pytest

from stache import MappingContext, Renderer
from stache._types import SECTION_OPENERS, EscapeMode, TagType
from stache.renderer import _ESCAPERS, _TAG_HANDLERS


class TestDispatchTableStructure:
    """Dispatch table structure and completeness."""

    def test_every_tag_kind_has_handler(self):
        assert set(_TAG_HANDLERS) == set(TagType)

    def test_handlers_are_renderer_methods(self):
        for kind, method_name in _TAG_HANDLERS.items():
            assert method_name.startswith("_"), f"{kind} handler should be private"
            assert callable(getattr(Renderer, method_name, None)), method_name

    def test_every_escape_mode_has_escaper(self):
        assert set(_ESCAPERS) == set(EscapeMode)

    def test_section_openers(self):
        assert frozenset({TagType.SECTION_OPEN, TagType.INVERTED_SECTION_OPEN}) == SECTION_OPENERS

    def test_comment_and_delimiter_share_skip(self):
        assert _TAG_HANDLERS[TagType.COMMENT] == _TAG_HANDLERS[TagType.SET_DELIMITER]


class TestDispatchBehavior:
    """Each tag kind routes to the right behaviour."""

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("{{v}}", "&lt;"),
            ("{{{v}}}", "<"),
            ("{{&v}}", "<"),
            ("{{#on}}x{{/on}}", "x"),
            ("{{^on}}x{{/on}}", ""),
            ("{{! c }}", ""),
            ("{{=| |=}}|v|", "&lt;"),
            ("{{>missing}}", ""),
        ],
    )
    def test_tag_kinds(self, template, expected):
        ctx = MappingContext({"v": "<", "on": True})
        assert Renderer().render(template, ctx) == expected

    def test_close_tag_routes_to_error(self):
        renderer = Renderer()
        renderer.render("{{/x}}", MappingContext())
        assert renderer.error == "Unexpected end tag"
