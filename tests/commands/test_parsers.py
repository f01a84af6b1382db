"""
Tests for the parameter parser library
"""
import pytest

from cmdseam.commands.parsers import (
    MISSING_VALUE,
    bigint_parser,
    enum_parser,
    number_parser,
    string_parser,
)
from cmdseam.errors import ParserError


class TestNumberParser:
    """Integer and decimal parsing with inclusive bounds"""

    def test_bounds_are_inclusive(self):
        parse = number_parser(min_value=0, max_value=100)
        assert parse("100") == 100
        assert parse("0") == 0
        with pytest.raises(ParserError):
            parse("150")
        with pytest.raises(ParserError):
            parse("-1")

    def test_integer_mode_rejects_garbage(self):
        parse = number_parser()
        with pytest.raises(ParserError, match="NaN"):
            parse("abc")
        with pytest.raises(ParserError):
            parse("1.5")

    def test_decimal_mode(self):
        parse = number_parser(decimal=True, max_value=2.5)
        assert parse("2.5") == 2.5
        assert parse("1") == 1.0
        with pytest.raises(ParserError):
            parse("2.6")
        with pytest.raises(ParserError):
            parse("nan")

    def test_json_numbers_accepted(self):
        parse = number_parser()
        assert parse(42) == 42
        assert parse(3.0) == 3
        with pytest.raises(ParserError):
            parse(3.5)
        with pytest.raises(ParserError):
            parse(True)

    def test_missing_value(self):
        with pytest.raises(ParserError, match=MISSING_VALUE):
            number_parser()(None)
        assert number_parser(optional=True)(None) is None


class TestBigIntParser:
    """Arbitrary precision integers"""

    def test_large_values(self):
        parse = bigint_parser(min_value=0)
        big = "123456789012345678901234567890"
        assert parse(big) == int(big)
        assert parse(2 ** 80) == 2 ** 80

    def test_thousands_of_digits(self):
        """No cap on literal length"""
        assert bigint_parser()("9" * 5000) == 10 ** 5000 - 1
        assert bigint_parser(max_value=0)(" -" + "9" * 5000) == -(10 ** 5000 - 1)
        assert number_parser()("1" + "0" * 5000) == 10 ** 5000
        with pytest.raises(ParserError, match="Invalid big integer value"):
            bigint_parser()("9" * 5000 + "x")

    def test_bounds(self):
        parse = bigint_parser(min_value=-(2 ** 64), max_value=2 ** 64)
        assert parse(str(2 ** 64)) == 2 ** 64
        with pytest.raises(ParserError):
            parse(str(2 ** 64 + 1))

    def test_rejects_non_integers(self):
        parse = bigint_parser()
        for raw in ("1.5", "ten", 1.5, [1]):
            with pytest.raises(ParserError):
                parse(raw)

    def test_optional(self):
        assert bigint_parser(optional=True)(None) is None
        with pytest.raises(ParserError, match=MISSING_VALUE):
            bigint_parser()(None)


class TestStringParser:
    """Length-bounded strings"""

    def test_length_bounds(self):
        parse = string_parser(min_length=2, max_length=4)
        assert parse("abc") == "abc"
        with pytest.raises(ParserError, match="min length: 2"):
            parse("a")
        with pytest.raises(ParserError, match="max length: 4"):
            parse("abcde")

    def test_unbounded_accepts_empty(self):
        assert string_parser()("") == ""

    def test_rejects_non_strings(self):
        with pytest.raises(ParserError):
            string_parser()(5)


class TestEnumParser:
    """Case-sensitive candidate sets"""

    def test_accepts_candidates(self):
        parse = enum_parser(["x", "y"])
        assert parse("x") == "x"
        assert parse("y") == "y"

    def test_error_lists_candidates(self):
        parse = enum_parser(["x", "y"])
        with pytest.raises(ParserError) as exc_info:
            parse("z")
        assert "x, y" in str(exc_info.value)

    def test_case_sensitive(self):
        with pytest.raises(ParserError):
            enum_parser(["x", "y"])("X")

    def test_optional(self):
        assert enum_parser(["x"], optional=True)(None) is None
