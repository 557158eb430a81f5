import asyncio

from ecolefinder.core.nodes.postal import PostalVariantsNode, related_postal_codes
from ecolefinder.core.workflow_types import SearchContext


def test_expand_postal_box_variants():
    assert related_postal_codes("87200") == [
        "87200", "87201", "87202", "87203", "87204",
        "87205", "87206", "87207", "87208", "87209",
    ]


def test_input_code_is_not_added_twice():
    codes = related_postal_codes("87205")
    assert codes[0] == "87205"
    assert codes.count("87205") == 1
    assert len(codes) == 9


def test_leading_zero_prefix_is_numeric():
    assert related_postal_codes("01000")[1:3] == ["1001", "1002"]


def test_malformed_input_does_not_crash():
    assert related_postal_codes("ab") == ["ab"]
    assert related_postal_codes("") == [""]


def test_node_stores_variants_on_context():
    ctx = SearchContext(sequence=1, commune_input="Limoges", postal_code="87000")
    ctx = asyncio.run(PostalVariantsNode().run(ctx))
    assert ctx.postal_codes[0] == "87000"
    assert len(ctx.postal_codes) == 10


def test_prefix_is_read_up_to_first_non_digit():
    assert related_postal_codes("87a12") == [
        "87a12", "8701", "8702", "8703", "8704", "8705", "8706", "8707", "8708", "8709",
    ]
