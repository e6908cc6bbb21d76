import pytest

from selector.schemas import (
    Coordinate,
    MalformedPickError,
    atoi,
    decode_picks,
    encode_picks,
    parse_pick,
)


@pytest.mark.parametrize("text, expected", [
    ("60", 60),
    ("-7", -7),
    ("+3", 3),
    ("", 0),
    ("abc", 0),
    (" 5", 0),
    ("1.5", 0),
    ("1_000", 0),
])
def test_atoi(text, expected):
    assert atoi(text) == expected


def test_parse_pick_centres_marker():
    assert parse_pick("60,70") == Coordinate(x=10, y=20)
    assert parse_pick("40,30") == Coordinate(x=-10, y=-20)


def test_parse_pick_non_numeric_is_zero():
    assert parse_pick("a,b") == Coordinate(x=-50, y=-50)


def test_parse_pick_ignores_extra_fields():
    assert parse_pick("100,100,7") == Coordinate(x=50, y=50)


def test_parse_pick_without_comma():
    with pytest.raises(MalformedPickError):
        parse_pick("15")


def test_encode_picks_is_compact_json_array():
    assert encode_picks(["60,70", "40,30"]) == b'["60,70","40,30"]'


def test_decode_picks():
    assert decode_picks(b'["60,70","40,30"]') == ["60,70", "40,30"]
    assert decode_picks(b"[]") == []
    assert decode_picks(b"null") == []


@pytest.mark.parametrize("raw", [b"not json", b'{"a": 1}', b"[1, 2]"])
def test_decode_picks_rejects_other_json(raw):
    with pytest.raises(ValueError):
        decode_picks(raw)
