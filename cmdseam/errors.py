"""
Error taxonomy

Every failure the dispatch core can produce falls into one of these classes.
Adapters catch them, classify them and render them for their transport; none
of them is fatal to a running adapter except TransportError raised from start().
"""

from typing import Any, Optional


class CommandSeamError(Exception):
    """Base exception for dispatch core errors."""
    pass


class ParserError(ValueError):
    """Raised by a parameter parser when a raw value is rejected.

    Carries only the reason; the parameter name is attached by the
    materializer when it wraps this into a ParameterError.
    """


class ProtocolEnvelopeError(CommandSeamError):
    """Malformed request envelope (JSON-RPC shape, batch, unparsable body)."""

    def __init__(self, code: int, message: str, request_id: Any = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.request_id = request_id
        self.data = data


class UnknownCommandError(CommandSeamError):
    """Raised when a command name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name


class ParameterError(CommandSeamError):
    """A raw parameter value could not be turned into a typed value."""

    def __init__(self, parameter_name: str, message: str):
        super().__init__(f"Parsing parameter '{parameter_name}': {message}")
        self.parameter_name = parameter_name
        self.message = message


class ExecutionError(CommandSeamError):
    """The command's own logic failed.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.command = command


class TransportError(CommandSeamError):
    """Listener bind failure or invalid adapter lifecycle transition."""
    pass
