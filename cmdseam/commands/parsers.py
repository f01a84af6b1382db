"""
Parameter Parser Library

Composable validators turning a raw wire value (a CLI token or a JSON scalar)
into a typed value. Each factory captures its bounds and returns a pure
``parse(raw)`` callable that either returns the value or raises ParserError.
"""

import decimal as _decimal
import math
import re
from typing import Any, Callable, Iterable, Optional, Union

from cmdseam.errors import ParserError

Number = Union[int, float]
ParamParser = Callable[[Any], Any]

MISSING_VALUE = "missing value"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _check_missing(raw: Any, optional: bool) -> bool:
    """Return True when the parser should short-circuit with None."""
    if raw is None:
        if optional:
            return True
        raise ParserError(MISSING_VALUE)
    return False


def _parse_integer_text(text: str) -> Optional[int]:
    """Base-10 integer literal to int, or None when ``text`` is not one

    Goes through Decimal so long literals are not subject to the int()
    digit limit.
    """
    text = text.strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(_decimal.Decimal(text))


def _check_bounds(value: Any, min_value: Any, max_value: Any) -> None:
    if min_value is not None and value < min_value:
        raise ParserError(f"Number must be greater than or equal to {min_value}")
    if max_value is not None and value > max_value:
        raise ParserError(f"Number must be less than or equal to {max_value}")


def number_parser(decimal: bool = False,
                  min_value: Optional[Number] = None,
                  max_value: Optional[Number] = None,
                  optional: bool = False) -> ParamParser:
    """Build a numeric parser

    Args:
        decimal: Parse as float instead of int
        min_value: Inclusive lower bound (optional)
        max_value: Inclusive upper bound (optional)
        optional: Return None instead of failing when the value is absent

    Returns:
        Callable parsing a raw value into an int or float
    """
    def parse(raw: Any) -> Optional[Number]:
        if _check_missing(raw, optional):
            return None
        if isinstance(raw, bool):
            raise ParserError("Number is NaN or null")

        if isinstance(raw, (int, float)):
            if decimal:
                value = float(raw)
            elif isinstance(raw, float):
                if not raw.is_integer():
                    raise ParserError("Number must be an integer")
                value = int(raw)
            else:
                value = raw
        elif isinstance(raw, str):
            if decimal:
                try:
                    value = float(raw)
                except ValueError:
                    raise ParserError("Number is NaN or null") from None
            else:
                value = _parse_integer_text(raw)
                if value is None:
                    raise ParserError("Number is NaN or null")
        else:
            raise ParserError("Number is NaN or null")

        if isinstance(value, float) and not math.isfinite(value):
            raise ParserError("Number is NaN or null")

        _check_bounds(value, min_value, max_value)
        return value

    return parse


def bigint_parser(min_value: Optional[int] = None,
                  max_value: Optional[int] = None,
                  optional: bool = False) -> ParamParser:
    """Build an arbitrary-precision integer parser

    Floats are only accepted when integral; textual input must be a base-10
    integer literal.
    """
    def parse(raw: Any) -> Optional[int]:
        if _check_missing(raw, optional):
            return None
        if isinstance(raw, bool):
            raise ParserError("Invalid big integer value")

        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, float):
            if not math.isfinite(raw) or not raw.is_integer():
                raise ParserError("Invalid big integer value")
            value = int(raw)
        elif isinstance(raw, str):
            value = _parse_integer_text(raw)
            if value is None:
                raise ParserError("Invalid big integer value")
        else:
            raise ParserError("Invalid big integer value")

        _check_bounds(value, min_value, max_value)
        return value

    return parse


def string_parser(min_length: Optional[int] = None,
                  max_length: Optional[int] = None,
                  optional: bool = False) -> ParamParser:
    """Build a string parser with optional length bounds."""
    def parse(raw: Any) -> Optional[str]:
        if _check_missing(raw, optional):
            return None
        if not isinstance(raw, str):
            raise ParserError("Value must be a string")
        if min_length is not None and len(raw) < min_length:
            raise ParserError(f"Invalid string length, min length: {min_length}")
        if max_length is not None and len(raw) > max_length:
            raise ParserError(f"Invalid string length, max length: {max_length}")
        return raw

    return parse


def enum_parser(candidates: Iterable[str], optional: bool = False) -> ParamParser:
    """Build a parser accepting exactly one of ``candidates`` (case-sensitive)."""
    ordered = list(candidates)
    allowed = frozenset(ordered)

    def parse(raw: Any) -> Optional[str]:
        if _check_missing(raw, optional):
            return None
        if not isinstance(raw, str) or raw not in allowed:
            raise ParserError("Invalid enum value, possible values: " + ", ".join(ordered))
        return raw

    return parse
