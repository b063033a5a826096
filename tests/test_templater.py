import jinja2
import pytest

from nexusfmt.templater import (
    Pair,
    Template,
    join,
    null_name,
    pad,
    quote,
    render_string,
    snake,
    sort_map,
    wrap,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("hello world", "hello_world"),
        ("no_spaces", "no_spaces"),
        (" leading space", "_leading_space"),
    ],
)
def test_snake(raw, expected):
    assert snake(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("simple", "simple"),
        ("has spaces", "'has spaces'"),
        ("has'quote", "'has''quote'"),
        ("already''escaped", "'already''escaped'"),
        ('has"double', "'has\"double'"),
    ],
)
def test_quote(raw, expected):
    assert quote(raw) == expected


def test_pad():
    assert pad(5, "foo") == "foo    "


def test_pad_does_not_truncate():
    assert pad(1, "longer") == "longer"


def test_null_name():
    assert null_name("") == "_"
    assert null_name("simple") == "simple"
    assert null_name("has space") == "'has space'"


def test_wrap():
    assert wrap("[", "]", "content") == "[content]"
    assert wrap("[", "]", "") == ""


def test_join():
    assert join(", ", ["a", "b", "c"]) == "a, b, c"


def test_sort_map():
    assert sort_map({"c": "3", "a": "1", "b": "2"}) == [
        Pair(key="a", value="1"),
        Pair(key="b", value="2"),
        Pair(key="c", value="3"),
    ]


def test_render_string_pipes_filters():
    result = render_string("Name: {{ Name | snake | quote }}", {"Name": "my bad name"})
    assert result == "Name: my_bad_name"


def test_render_string_invalid_template():
    with pytest.raises(jinja2.TemplateSyntaxError):
        render_string("{{ Unclosed", None)


def test_custom_function_map():
    tmpl = Template("test", "{{ Val | custom_func }}", {"custom_func": str.upper})
    assert tmpl.render({"Val": "lower"}) == "LOWER"


def test_custom_function_as_global():
    tmpl = Template("test", "{{ shout(Val) }}", {"shout": str.upper})
    assert tmpl.render({"Val": "hi"}) == "HI"


def test_render_execution_error():
    tmpl = Template("test", "{{ data.Missing.Field }}")
    with pytest.raises(jinja2.UndefinedError):
        tmpl.render("not a struct")


def test_helpers_as_globals_keep_argument_order():
    tmpl = Template("test", "[{{ pad(3, x) }}]{{ wrap('<', '>', x) }}")
    assert tmpl.render({"x": "ab"}) == "[ab   ]<ab>"


def test_helpers_as_filters_take_value_first():
    tmpl = Template("test", "{{ items | join(',') }}|{{ x | pad(2) }}|")
    assert tmpl.render({"items": ["a", "b"], "x": "z"}) == "a,b|z   |"


def test_object_available_as_data():
    class Thing:
        title = "Big Tree"

    assert render_string("{{ data.title | quote }}", Thing()) == "'Big Tree'"


def test_sort_map_in_template():
    layout = "{% for p in sort_map(m) %}{{ p.key }}={{ p.value }};{% endfor %}"
    assert render_string(layout, {"m": {"b": 2, "a": 1}}) == "a=1;b=2;"


def test_trailing_newline_kept():
    assert render_string("line\n", {}) == "line\n"