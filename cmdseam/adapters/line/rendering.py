"""
Line protocol text rendering: help listings, usage strings and errors.
"""

from typing import Iterable, List

from cmdseam.commands.descriptor import CommandDescriptor
from cmdseam.errors import ParameterError

HELP_HINT = "Use 'help <command name>' for usage examples, description & help around a specific command!"
UNKNOWN_COMMAND = "Error: Unknown command, please type 'help' to get a list of all commands!"
LINE_TOO_LONG = "Error: Line too long, input discarded"


def usage_string(descriptor: CommandDescriptor) -> str:
    parts = [descriptor.name] + [f"<{param.name}>" for param in descriptor.positional_parameters]
    return " ".join(parts)


def params_description(descriptor: CommandDescriptor) -> List[str]:
    return [f"--{param.name} : {param.description}" for param in descriptor.parameters]


def command_help(descriptor: CommandDescriptor) -> str:
    lines = [
        f"Command: {descriptor.name}",
        f"Description: {descriptor.description}",
        f"Usage: {usage_string(descriptor)}",
    ]
    param_lines = params_description(descriptor)
    if param_lines:
        lines.append("Params:")
        lines.extend("    " + line for line in param_lines)
    return "\n".join(lines)


def general_help(descriptors: Iterable[CommandDescriptor]) -> str:
    lines = ["Available commands:"]
    lines.extend(f"    {d.name} : {d.description}" for d in descriptors)
    lines.append(HELP_HINT)
    return "\n".join(lines)


def parameter_error(error: ParameterError, descriptor: CommandDescriptor) -> str:
    return f"Error: {error}\n\n{command_help(descriptor)}"


def execution_error(message: str) -> str:
    return f"Error: {message}"
