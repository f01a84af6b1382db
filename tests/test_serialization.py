"""
Tests for result serialization
"""
import enum
from dataclasses import dataclass

from cmdseam.utils.serialization import dumps, format_for_cli, to_jsonable


class Color(enum.Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


def test_to_jsonable_structures():
    value = {"point": Point(1, 2), "color": Color.RED, "tags": ("a", "b"), 3: None}
    assert to_jsonable(value) == {"point": {"x": 1, "y": 2}, "color": "red", "tags": ["a", "b"], "3": None}


def test_big_integers_survive():
    assert dumps({"n": 2 ** 100}) == '{"n": %d}' % 2 ** 100


def test_format_for_cli():
    assert format_for_cli("plain text") == "plain text"
    assert format_for_cli(42) == "42"
    assert format_for_cli(None) == "null"
    assert format_for_cli({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}'
