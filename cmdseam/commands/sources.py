"""
Raw parameter sources

The closed set of shapes in which a transport can hand parameter data to the
materializer.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Tuple, Union

from cmdseam.errors import ParameterError


@dataclass(frozen=True)
class EmptySource:
    """No parameters supplied at all"""


@dataclass(frozen=True)
class PositionalTokens:
    """Ordered free-text tokens (line protocol)"""
    tokens: Tuple[str, ...] = ()

    def __init__(self, tokens: Sequence[str] = ()):
        object.__setattr__(self, "tokens", tuple(tokens))


@dataclass(frozen=True)
class PositionalValues:
    """Ordered JSON values (JSON-RPC array params)"""
    values: Tuple[Any, ...] = ()

    def __init__(self, values: Sequence[Any] = ()):
        object.__setattr__(self, "values", tuple(values))


@dataclass(frozen=True)
class NamedValues:
    """Name to value mapping (JSON-RPC object params, merged CLI flags)"""
    values: Mapping[str, Any] = field(default_factory=dict)


RawParameterSource = Union[EmptySource, PositionalTokens, PositionalValues, NamedValues]

INVALID_PARAMS_SHAPE = "Parameters must be an array or object"


class InvalidParamsShape(ParameterError):
    """``params`` is neither absent, an array nor an object."""

    def __init__(self):
        super().__init__("params", INVALID_PARAMS_SHAPE)

    def __str__(self):
        return INVALID_PARAMS_SHAPE


_ABSENT = object()


def source_from_json_params(params: Any = _ABSENT) -> RawParameterSource:
    """Map a JSON-RPC ``params`` member to a raw parameter source

    Args:
        params: The ``params`` value, or nothing when the member is absent

    Returns:
        RawParameterSource: EmptySource, PositionalValues or NamedValues

    Raises:
        InvalidParamsShape: params is any other JSON type
    """
    if params is _ABSENT:
        return EmptySource()
    if isinstance(params, list):
        return PositionalValues(params)
    if isinstance(params, dict):
        return NamedValues(dict(params))
    raise InvalidParamsShape()
