from __future__ import annotations

import pytest

from conl_parser import Array, MultilineScalar, Scalar, Table, TableArray, from_python, to_python
from conl_parser.values import validate_key


@pytest.mark.parametrize("key", ["", " padded", "padded ", "a = b", "=x", "two\nlines"])
def test_invalid_keys(key):
    with pytest.raises(ValueError):
        validate_key(key)


@pytest.mark.parametrize("key", ["name", "stamp_images", "stamp images", "a=b", "über"])
def test_valid_keys(key):
    assert validate_key(key) == key


def test_table_rejects_bad_key():
    with pytest.raises(ValueError):
        Table({" x": "1"})


def test_table_preserves_insertion_order():
    t = Table({"z": "1", "a": "2", "m": "3"})
    assert list(t) == ["z", "a", "m"]
    assert t["a"] == Scalar("2")
    assert "m" in t and "q" not in t
    assert t.get("q") is None


def test_multiline_scalar_normalizes_text():
    m = MultilineScalar("md", "\r\n  \nfirst\r\n   \nsecond\n\n")
    assert m.text == "first\n\nsecond"


def test_multiline_scalar_rejects_blank_text():
    with pytest.raises(ValueError):
        MultilineScalar("md", "  \n\n")


def test_multiline_scalar_rejects_bad_hint():
    with pytest.raises(ValueError):
        MultilineScalar(" md", "text")


def test_array_rejects_nested_values():
    with pytest.raises(ValueError):
        Array([Table()])


def test_to_python():
    tree = Table(
        {
            "name": "x",
            "about": MultilineScalar("md", "a\nb"),
            "tags": Array(["1", "2"]),
            "products": TableArray([{"title": "t"}]),
        }
    )
    assert to_python(tree) == {
        "name": "x",
        "about": "a\nb",
        "tags": ["1", "2"],
        "products": [{"title": "t"}],
    }


def test_from_python():
    tree = from_python(
        {
            "name": "x",
            "year": 2016,
            "forever": True,
            "rate": 0.49,
            "missing": None,
            "tags": ["a", None, "b"],
            "products": [{"title": "t"}],
            "credits": {"artist": "Jane"},
        }
    )
    assert tree == Table(
        {
            "name": "x",
            "year": "2016",
            "forever": "true",
            "rate": "0.49",
            "tags": Array(["a", "b"]),
            "products": TableArray([Table({"title": "t"})]),
            "credits": Table({"artist": "Jane"}),
        }
    )


def test_from_python_rejects_unknown_types():
    with pytest.raises(TypeError):
        from_python({"x": object()})


def test_key_with_byte_order_mark_is_rejected():
    with pytest.raises(ValueError):
        validate_key("\ufeffk")
    with pytest.raises(ValueError):
        Table({"\ufeffk": "v"})


@pytest.mark.parametrize("build", [lambda: Array([]), lambda: TableArray([])])
def test_empty_lists_have_no_value(build):
    with pytest.raises(ValueError):
        build()


def test_from_python_omits_empty_lists():
    assert from_python({"a": "1", "tags": [], "items": (), "gone": [None]}) == Table({"a": "1"})
