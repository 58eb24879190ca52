import pytest

from commands.command_parser import (
    clean_phrase,
    is_multi_command,
    match_simple,
    parse_command,
    segment,
    split_multi_command,
)
from commands.errors import (
    EmptySegmentationResult,
    InvalidQuantity,
    UnrecognizedCommandSyntax,
)
from models.inventory_item import ParsedSegment


def test_single_command_with_spoken_number():
    assert parse_command("coca cola veinte") == [ParsedSegment("coca cola", 20.0)]


def test_multi_command_with_commas():
    assert parse_command("cervezas cinco, papas tres") == [
        ParsedSegment("cervezas", 5.0),
        ParsedSegment("papas", 3.0),
    ]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("cocacola 3 cervezas 2", True),
        ("cocacola tres, cervezas dos", True),
        ("coca cola 3; pepsi", True),
        ("ron 2, y cervezas 4", True),
        ("coca cola 3 también pepsi", True),
        ("cocacola 3", False),
        ("agua mineral 500ml 2", False),
    ],
)
def test_is_multi_command(text, expected):
    assert is_multi_command(text) is expected


def test_comma_heuristic_can_be_disabled():
    assert is_multi_command("ron, añejo 5") is True
    assert is_multi_command("ron, añejo 5", comma_heuristic=False) is False


def test_segment_strips_connectors_and_verbs():
    assert segment("coca cola veinte y cervezas doce") == [
        ParsedSegment("coca cola", 20.0),
        ParsedSegment("cervezas", 12.0),
    ]
    assert segment("añadir coca cola 2, agregar pepsi 3") == [
        ParsedSegment("coca cola", 2.0),
        ParsedSegment("pepsi", 3.0),
    ]


def test_segment_drops_short_phrases():
    assert segment("te 3 cervezas 5") == [ParsedSegment("cervezas", 5.0)]
    assert segment("te 3 cervezas 5", min_query_length=2) == [
        ParsedSegment("te", 3.0),
        ParsedSegment("cervezas", 5.0),
    ]


def test_segment_drops_invalid_quantities():
    assert segment("cervezas 0 papas 3") == [ParsedSegment("papas", 3.0)]


def test_segment_discards_trailing_text():
    assert segment("coca cola 2 y pepsi 4 y algo mas") == [
        ParsedSegment("coca cola", 2.0),
        ParsedSegment("pepsi", 4.0),
    ]


def test_split_keeps_a_single_usable_segment():
    assert split_multi_command("te 3 cervezas 5") == [ParsedSegment("cervezas", 5.0)]

    with pytest.raises(EmptySegmentationResult) as exc:
        split_multi_command("te 3 yo 5")
    assert exc.value.usable == 0


def test_invalid_segment_does_not_swallow_the_rest():
    rejected = []
    assert parse_command("cervezas 0, papas 3", rejected=rejected) == [
        ParsedSegment("papas", 3.0)
    ]
    assert [e.query for e in rejected] == ["cervezas"]

    assert parse_command("te 3 cervezas 5") == [ParsedSegment("cervezas", 5.0)]


def test_all_segments_invalid_raises_first_one():
    with pytest.raises(InvalidQuantity) as exc:
        parse_command("cervezas 0, papas 0")
    assert exc.value.query == "cervezas"


def test_comma_heuristic_with_one_number_keeps_the_phrase():
    assert parse_command("ron, añejo 5") == [ParsedSegment("ron, añejo", 5.0)]


def test_decimal_comma():
    assert parse_command("leche 1,5") == [ParsedSegment("leche", 1.5)]
    assert parse_command("leche 1,5, papas 2") == [
        ParsedSegment("leche", 1.5),
        ParsedSegment("papas", 2.0),
    ]
    assert is_multi_command("leche 1,5") is False
    # "1,5ml" es parte del nombre
    assert segment("agua 1,5ml 3") == [ParsedSegment("agua 1,5ml", 3.0)]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("coca cola 20", ParsedSegment("coca cola", 20.0)),
        ("añadir pepsi tres", ParsedSegment("pepsi", 3.0)),
        ("cambiar agua mineral a 4", ParsedSegment("agua mineral", 4.0)),
        ("Papas fritas 2.5.", ParsedSegment("papas fritas", 2.5)),
    ],
)
def test_match_simple(text, expected):
    assert match_simple(text) == expected


def test_match_simple_without_quantity():
    assert match_simple("coca cola") is None
    assert match_simple("coca cola 0") is None


@pytest.mark.parametrize("text", ["coca cola cero", "coca cola 0", "coca cola -5"])
def test_non_positive_quantity_is_rejected(text):
    with pytest.raises(InvalidQuantity) as exc:
        parse_command(text)
    assert exc.value.query == "coca cola"


@pytest.mark.parametrize("text", ["hola que tal", "", "   "])
def test_unrecognized_syntax_shows_examples(text):
    with pytest.raises(UnrecognizedCommandSyntax) as exc:
        parse_command(text)
    assert '"coca cola 20"' in exc.value.message
    assert '"cervezas 5, papas 3"' in exc.value.message


def test_clean_phrase():
    assert clean_phrase(", y cervezas ") == "cervezas"
    assert clean_phrase("poner coca cola a") == "coca cola"
