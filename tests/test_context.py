"""Tests for MappingContext and JsonContext."""

from __future__ import annotations

import json

import pytest

from stache import DictLoader, JsonContext, MappingContext, Renderer
from stache.context import MISSING, Context, format_value
from stache.context.mapping import get_member, is_list
from stache.environment.registry import FunctionRegistry


class TestFormatValue:
    """Text form of resolved values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            (MISSING, ""),
            (True, "true"),
            (False, "false"),
            (0, "0"),
            (42, "42"),
            (30.0, "30"),
            (-4.0, "-4"),
            (123.456, "123.456"),
            (1 / 3, "0.333333"),
            (1e20, "100000000000000000000"),
            ("text", "text"),
            ({"a": 1}, ""),
            ([1, 2], ""),
            ((1,), ""),
        ],
    )
    def test_formatting(self, value, expected):
        assert format_value(value) == expected

    def test_callable_is_empty(self):
        assert format_value(len) == ""

    def test_other_objects_use_str(self):
        class Money:
            def __str__(self):
                return "$5"

        assert format_value(Money()) == "$5"


class TestMembers:
    """Single-frame member access."""

    def test_mapping_key(self):
        assert get_member({"a": 1}, "a") == 1
        assert get_member({"a": 1}, "b") is MISSING

    def test_object_attribute(self):
        class Point:
            x = 3
            _hidden = 4

        assert get_member(Point(), "x") == 3
        assert get_member(Point(), "_hidden") is MISSING

    @pytest.mark.parametrize("frame", [None, 1, 2.5, True, "str", [1, 2]])
    def test_scalars_and_lists_have_no_members(self, frame):
        assert get_member(frame, "real") is MISSING

    def test_is_list(self):
        assert is_list([1])
        assert is_list(())
        assert not is_list("abc")
        assert not is_list(b"abc")
        assert not is_list({"a": 1})


class TestLookup:
    """Scope stack walk."""

    def test_root_lookup(self):
        ctx = MappingContext({"name": "John"})
        assert ctx.string_value("name") == "John"

    def test_none_data_is_empty_root(self):
        ctx = MappingContext()
        assert ctx.string_value("x") == ""
        assert ctx.is_false("x")

    def test_inner_shadows_outer(self):
        ctx = MappingContext({"name": "outer", "user": {"name": "inner"}})
        ctx.push("user")
        assert ctx.string_value("name") == "inner"
        ctx.pop()
        assert ctx.string_value("name") == "outer"

    def test_walks_outwards(self):
        ctx = MappingContext({"site": "S", "user": {"name": "N"}})
        ctx.push("user")
        assert ctx.string_value("site") == "S"

    def test_dot_is_top_frame(self):
        ctx = MappingContext({"l": ["a", "b"]})
        ctx.push("l", 1)
        assert ctx.string_value(".") == "b"
        assert ctx.lookup(".") == "b"

    def test_dotted_name_resolves_head_by_walk(self):
        ctx = MappingContext({"user": {"address": {"city": "Oslo"}}, "item": {}})
        ctx.push("item")
        assert ctx.string_value("user.address.city") == "Oslo"

    def test_dotted_name_does_not_fall_back(self):
        ctx = MappingContext({"a": {"b": {}}, "c": "outer"})
        assert ctx.lookup("a.b.c") is MISSING

    def test_null_value(self):
        ctx = MappingContext({"x": None})
        assert ctx.string_value("x") == ""
        assert ctx.is_false("x")


class TestStack:
    """push/pop behaviour."""

    def test_push_list_element(self):
        ctx = MappingContext({"items": [{"n": 1}, {"n": 2}]})
        ctx.push("items", 1)
        assert ctx.string_value("n") == "2"
        assert ctx.depth == 2

    def test_push_out_of_range_is_inert(self):
        ctx = MappingContext({"n": "root", "items": [{"n": 1}]})
        ctx.push("items", 5)
        assert ctx.top is None
        assert ctx.string_value("n") == "root"

    def test_push_missing_is_inert(self):
        ctx = MappingContext({"n": "root"})
        ctx.push("missing")
        assert ctx.depth == 2
        assert ctx.top is None
        assert ctx.string_value("n") == "root"

    def test_push_without_index_pushes_value(self):
        ctx = MappingContext({"m": {"k": "v"}})
        ctx.push("m")
        assert ctx.top == {"k": "v"}

    def test_pop_keeps_root(self):
        ctx = MappingContext({"a": 1})
        ctx.pop()
        ctx.pop()
        assert ctx.depth == 1
        assert ctx.string_value("a") == "1"


class TestTruthiness:
    """is_false and list_count."""

    @pytest.mark.parametrize(
        "value,falsy",
        [
            (None, True),
            (False, True),
            (True, False),
            ("", True),
            ("false", True),
            ("False", True),
            ("no", False),
            ([], False),
            ([None], False),
            ({}, False),
            (0, False),
            (0.0, False),
        ],
    )
    def test_is_false(self, value, falsy):
        assert MappingContext({"v": value}).is_false("v") is falsy

    def test_list_count(self):
        ctx = MappingContext({"l": [1, 2, 3], "t": (1,), "s": "abc", "d": {"a": 1}})
        assert ctx.list_count("l") == 3
        assert ctx.list_count("t") == 1
        assert ctx.list_count("s") == 0
        assert ctx.list_count("d") == 0
        assert ctx.list_count("missing") == 0


class TestFunctions:
    """Custom section functions on a context."""

    def test_registry_function(self):
        ctx = MappingContext({}, functions={"f": lambda text, r, c: text * 2})
        assert ctx.can_eval("f")
        assert ctx.evaluate("f", "ab", Renderer()) == "abab"

    def test_registry_is_copied(self):
        registry = FunctionRegistry({"f": len})
        ctx = MappingContext({}, functions=registry)
        assert ctx.functions is not registry
        assert ctx.can_eval("f")
        ctx.register_function("g", lambda text, r, c: "x")
        assert "g" not in registry

    def test_register_function(self):
        ctx = MappingContext({})
        ctx.register_function("f", lambda text, r, c: "x")
        assert ctx.can_eval("f")

    def test_classes_are_not_functions(self):
        ctx = MappingContext({"cls": dict})
        assert not ctx.can_eval("cls")

    def test_plain_values_are_not_functions(self):
        ctx = MappingContext({"v": "text"})
        assert not ctx.can_eval("v")
        assert ctx.evaluate("v", "body", Renderer()) == ""

    def test_result_is_converted_to_text(self):
        ctx = MappingContext({"n": lambda text, r, c: 7})
        assert ctx.evaluate("n", "", Renderer()) == "7"


class TestPartials:
    """partial_value via the loader."""

    def test_partial_from_loader(self):
        ctx = MappingContext({}, loader=DictLoader({"p": "text"}))
        assert ctx.partial_value("p") == "text"

    def test_unknown_partial_is_empty(self):
        ctx = MappingContext({}, loader=DictLoader({"p": "text"}))
        assert ctx.partial_value("q") == ""

    def test_no_loader(self):
        assert MappingContext({}).partial_value("p") == ""


class TestBaseContext:
    """Defaults of the abstract Context."""

    class Minimal(Context):
        def string_value(self, key):
            return key.upper()

        def is_false(self, key):
            return key == "off"

        def list_count(self, key):
            return 0

        def push(self, key, index=None):
            pass

        def pop(self):
            pass

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Context()

    def test_custom_context_renders(self):
        ctx = self.Minimal()
        output = Renderer().render("{{a}}{{#on}}!{{/on}}{{#off}}?{{/off}}", ctx)
        assert output == "A!"

    def test_defaults(self):
        ctx = self.Minimal()
        assert ctx.loader is None
        assert not ctx.can_eval("x")
        assert ctx.evaluate("x", "t", Renderer()) == ""
        assert ctx.partial_value("x") == ""


class TestJsonContext:
    """JSON-backed context."""

    def test_from_text(self):
        ctx = JsonContext('{"name": "John", "age": 30, "ratio": 0.5}')
        output = Renderer().render("{{name}} is {{age}} ({{ratio}})", ctx)
        assert output == "John is 30 (0.5)"

    def test_from_bytes(self):
        ctx = JsonContext(b'{"ok": true}')
        assert ctx.string_value("ok") == "true"

    def test_parsed_value(self):
        ctx = JsonContext({"a": [1, 2]})
        assert ctx.list_count("a") == 2

    def test_json_numbers(self):
        ctx = JsonContext('{"i": 30, "f": 30.0, "g": 123.456, "n": null}')
        assert ctx.string_value("i") == "30"
        assert ctx.string_value("f") == "30"
        assert ctx.string_value("g") == "123.456"
        assert ctx.string_value("n") == ""

    def test_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            JsonContext("{not json")

    def test_from_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"items": [{"name": "a"}, {"name": "b"}]}', encoding="utf-8")
        ctx = JsonContext.from_file(path)
        assert Renderer().render("{{#items}}{{name}}{{/items}}", ctx) == "ab"

    def test_repr(self):
        assert repr(JsonContext("{}")) == "<JsonContext depth=1>"
