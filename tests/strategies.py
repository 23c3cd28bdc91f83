"""Shared hypothesis strategies for stache property-based testing.

Provides reusable strategies at two levels:

- **Text**: plain text without delimiters, HTML-heavy strings, arbitrary input
- **Templates**: fragments mixing text with value tags and comments

Individual test modules compose them into property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Text strategies
# ---------------------------------------------------------------------------

# Plain text that can never contain the default delimiters
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{}\x00",
    ),
    min_size=0,
    max_size=200,
)

# Strings dense in characters the escaper touches
html_text = st.text(
    alphabet=st.sampled_from(list('&<>"\'abc ;#lgtquomp')),
    min_size=0,
    max_size=80,
)

# Arbitrary input that might stress the scanner (fuzz-like)
arbitrary_template_source = st.lists(
    st.one_of(
        st.characters(blacklist_categories=("Cs",)),
        st.sampled_from(["{{", "}}", "{{#", "{{/", "{{^", "{{>", "{{=", "{{{", "}}}", "\n", " "]),
    ),
    max_size=150,
).map("".join)

# ---------------------------------------------------------------------------
# Template strategies
# ---------------------------------------------------------------------------

safe_identifier = st.sampled_from(
    ["x", "y", "name", "item", "title", "count", "flag", "data", "foo", "bar"]
)

# Text that stays literal between tags
_fragment_text = st.text(
    alphabet=st.sampled_from(list("abc XYZ-.\n\t")),
    min_size=0,
    max_size=20,
)

value_tag = safe_identifier.map(lambda name: f"{{{{{name}}}}}")

comment_tag = st.from_regex(r"[a-zA-Z0-9_ ]{0,20}", fullmatch=True).map(
    lambda body: f"{{{{!{body}}}}}"
)

# Fragments of text interleaved with value tags and comments
template_fragment = st.lists(
    st.one_of(_fragment_text, value_tag, comment_tag),
    min_size=1,
    max_size=6,
).map("".join)

# Scalar values a data source can hold
scalar_value = st.one_of(
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=20),
    st.integers(min_value=-10_000, max_value=10_000),
    st.booleans(),
    st.none(),
)

# Short non-empty lists of plain strings for iteration tests
string_items = st.lists(plain_text.filter(lambda s: len(s) < 20), min_size=1, max_size=8)
