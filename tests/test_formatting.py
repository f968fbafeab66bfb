import pytest

from schemadoc.cardinality import Cardinality
from schemadoc.formatting import (
    escape_double_quote,
    escape_mermaid,
    escape_nl,
    escape_url,
    label_join,
    left_cardinality,
    nl2br,
    nl2br_slash,
    nl2mdnl,
    nl2space,
    right_cardinality,
    show_only_first_paragraph,
    template_funcs,
)
from schemadoc.schema import Label, Labels


def test_nl2br_all_newline_kinds():
    assert nl2br("a\r\nb\nc\rd") == "a<br>b<br>c<br>d"


def test_nl2br_slash():
    assert nl2br_slash("a\nb") == "a<br />b"


def test_nl2mdnl():
    assert nl2mdnl("a\r\nb") == "a  \nb"


def test_nl2space_and_escape_nl():
    assert nl2space("a\r\nb\rc") == "a b c"
    assert escape_nl("a\nb") == "a\\nb"


def test_escape_double_quote():
    assert escape_double_quote('say "hi"') == "say #quot;hi#quot;"


@pytest.mark.parametrize(
    "text, first",
    [
        ("first\n\nsecond", "first"),
        ("first\r\n\r\nsecond\n\nthird", "first"),
        ("first\r\rsecond", "first"),
        ("only one", "only one"),
    ],
)
def test_show_only_first_paragraph(text, first):
    assert show_only_first_paragraph(text) == first


def test_label_join():
    labels = Labels([Label(name="blue"), Label(name="green", virtual=True)])
    assert label_join(labels) == "`blue` `green`"
    assert label_join(Labels()) == ""


def test_escape_url():
    assert escape_url("a b") == "a%20b"
    assert escape_url("public.users") == "public.users"
    assert escape_url("x%2Fy") == "x%2Fy"


def test_escape_url_lone_percent_is_escaped():
    assert escape_url("%zz").startswith("%25")


def test_escape_mermaid():
    assert escape_mermaid("table a.b") == "table_a_b"
    assert escape_mermaid("ok_name-1") == "ok_name-1"


@pytest.mark.parametrize(
    "cardinality, left, right",
    [
        (Cardinality.ZERO_OR_ONE, "|o", "o|"),
        (Cardinality.EXACTLY_ONE, "||", "||"),
        (Cardinality.ZERO_OR_MORE, "}o", "o{"),
        (Cardinality.ONE_OR_MORE, "}|", "|{"),
        (Cardinality.UNKNOWN, "}", ""),
    ],
)
def test_cardinality_markers(cardinality, left, right):
    assert left_cardinality(cardinality) == left
    assert right_cardinality(cardinality) == right


def test_template_funcs_use_lookup():
    words = {"Name": "Nom"}
    funcs = template_funcs(lambda text: words.get(text, text))
    assert funcs["lookup"]("Name") == "Nom"
    assert funcs["nl2br"]("a\nb") == "a<br>b"
    assert funcs["lcardi"](Cardinality.ONE_OR_MORE) == "}|"


def test_template_funcs_default_lookup_is_identity():
    assert template_funcs()["lookup"]("Comment") == "Comment"