"""
Argument Materializer

Shared by both adapters: turns a raw parameter source into the typed argument
map a command expects, then runs the command.
"""

import inspect
import logging
from typing import Any, Dict, List, Tuple

from cmdseam.commands.descriptor import CommandDescriptor, EmitFn, ParameterSpec
from cmdseam.commands.sources import (
    EmptySource,
    NamedValues,
    PositionalTokens,
    PositionalValues,
    RawParameterSource,
)
from cmdseam.errors import ExecutionError, ParameterError, ParserError

logger = logging.getLogger(__name__)


def _bind_raw_values(descriptor: CommandDescriptor,
                     source: RawParameterSource) -> List[Tuple[ParameterSpec, Any]]:
    """Pair every parameter with its raw value, in declaration order."""
    if isinstance(source, EmptySource):
        return [(param, None) for param in descriptor.parameters]

    if isinstance(source, (PositionalTokens, PositionalValues)):
        values = source.tokens if isinstance(source, PositionalTokens) else source.values
        # Values beyond the positional slots are dropped on purpose
        slots = dict(zip((p.name for p in descriptor.positional_parameters), values))
        return [(param, slots.get(param.name)) for param in descriptor.parameters]

    if isinstance(source, NamedValues):
        return [(param, source.values.get(param.name)) for param in descriptor.parameters]

    raise TypeError(f"Unsupported parameter source: {type(source).__name__}")


def materialize(descriptor: CommandDescriptor, source: RawParameterSource) -> Dict[str, Any]:
    """Parse raw parameters into typed arguments

    Args:
        descriptor: Target command
        source: Raw parameter data from the transport

    Returns:
        Dict: One entry per declared parameter

    Raises:
        ParameterError: First parameter (in declaration order) that failed to parse
    """
    args = {}
    for param, raw in _bind_raw_values(descriptor, source):
        try:
            args[param.name] = param.parser(raw)
        except ParserError as e:
            raise ParameterError(param.name, str(e)) from e
        except Exception as e:
            # Custom parsers may raise anything; it still names the parameter
            logger.debug(f"Parser for '{param.name}' raised {type(e).__name__}: {e}")
            raise ParameterError(param.name, str(e) or type(e).__name__) from e
    return args


async def execute_command(descriptor: CommandDescriptor,
                          source: RawParameterSource,
                          emit: EmitFn) -> Any:
    """Materialize arguments and run the command

    Returns:
        Whatever the command returned, untouched

    Raises:
        ParameterError: Argument materialization failed
        ExecutionError: The command itself raised
    """
    args = materialize(descriptor, source)

    try:
        result = descriptor.execute(args, emit)
        if inspect.isawaitable(result):
            result = await result
    except ParameterError:
        raise
    except Exception as e:
        logger.error(f"Command '{descriptor.name}' failed: {e}")
        message = str(e) or type(e).__name__
        raise ExecutionError(message, command=descriptor.name) from e

    return result
