import pytest

from scrumcmd.services import codec


@pytest.mark.parametrize("ids", [
    [],
    ["e1"],
    ["e1", "e2"],
    ["p3", "p1", "p2"],
    ["a", "a"],
    [" e1", "e2 "],
    [" "],
    ["  ", "e1", "\t"],
    ["id con espacios", "ñandú"],
])
def test_decode_encode_round_trip(ids):
    assert codec.decode(codec.encode(ids)) == ids


def test_empty_set_encoding():
    assert codec.encode([]) == ""
    assert codec.decode("") == []
    assert codec.decode(None) == []


def test_decode_drops_empty_segments_and_keeps_order():
    assert codec.decode("b,,a,") == ["b", "a"]
    assert codec.decode(",") == []


def test_decode_keeps_segments_verbatim():
    assert codec.decode(" e1 , e2") == [" e1 ", " e2"]
    assert codec.decode(" ") == [" "]


def test_decode_keeps_duplicates():
    assert codec.decode("e1,e1") == ["e1", "e1"]


def test_encode_skips_empty_elements():
    assert codec.encode(["e1", "", "e2"]) == "e1,e2"


def test_remove_drops_every_occurrence():
    assert codec.remove("e1,e2,e1", "e1") == "e2"
    assert codec.remove("e1", "e1") == ""
    assert codec.remove("", "e1") == ""
