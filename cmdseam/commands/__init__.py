"""
Command Core Module

Transport-independent pieces shared by every adapter:
- parsers: parameter validators
- descriptor: command and parameter schema
- sources: raw parameter shapes handed over by transports
- materializer: raw parameters to typed arguments, command execution
- registry: insert-once command table
"""

from .descriptor import CommandDescriptor, ParameterSpec, create_command, noop_emit
from .materializer import execute_command, materialize
from .parsers import bigint_parser, enum_parser, number_parser, string_parser
from .registry import CommandRegistry
from .sources import EmptySource, NamedValues, PositionalTokens, PositionalValues

__all__ = [
    "CommandDescriptor",
    "ParameterSpec",
    "create_command",
    "noop_emit",
    "execute_command",
    "materialize",
    "bigint_parser",
    "enum_parser",
    "number_parser",
    "string_parser",
    "CommandRegistry",
    "EmptySource",
    "NamedValues",
    "PositionalTokens",
    "PositionalValues",
]
