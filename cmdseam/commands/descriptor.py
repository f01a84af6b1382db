"""
Command descriptors

A CommandDescriptor binds a name, a description and an ordered list of
ParameterSpec entries to an asynchronous execution function. Both adapters
consume descriptors the same way.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from cmdseam.commands.parsers import ParamParser

EmitFn = Callable[[str], None]
ExecuteFn = Callable[[Dict[str, Any], EmitFn], Awaitable[Any]]


def noop_emit(line: str) -> None:
    """Output sink for transports without a persistent output channel."""
    return None


@dataclass(frozen=True)
class ParameterSpec:
    """Declarative schema of one command parameter"""
    name: str
    parser: ParamParser
    description: str = ""
    positional: bool = False


@dataclass
class CommandDescriptor:
    """Schema and executable binding of one named command"""
    name: str
    description: str
    execute: ExecuteFn
    parameters: List[ParameterSpec] = field(default_factory=list)

    def __post_init__(self):
        seen = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter '{param.name}' in command '{self.name}'")
            seen.add(param.name)
        if not callable(self.execute):
            raise TypeError(f"Command '{self.name}' execute must be callable")

    @property
    def positional_parameters(self) -> List[ParameterSpec]:
        """Positional parameters in declaration order"""
        return [param for param in self.parameters if param.positional]

    def get_parameter(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None


def create_command(name: str,
                   description: str,
                   args: Mapping[str, Union[ParameterSpec, Mapping[str, Any]]],
                   execute: ExecuteFn) -> CommandDescriptor:
    """Build a descriptor from the collaborator command shape

    Args:
        name: Command name
        description: One-line description shown in help listings
        args: Ordered mapping of parameter name to either a ParameterSpec or a
            dict with ``parser``, ``description`` and an optional ``base`` flag
            marking the parameter as positional
        execute: Coroutine function ``execute(args, emit)``

    Returns:
        CommandDescriptor: The descriptor
    """
    parameters = []
    for arg_name, spec in args.items():
        if isinstance(spec, ParameterSpec):
            if spec.name != arg_name:
                raise ValueError(f"Parameter key '{arg_name}' does not match spec name '{spec.name}'")
            parameters.append(spec)
            continue
        if "parser" not in spec:
            raise ValueError(f"Parameter '{arg_name}' of command '{name}' has no parser")
        parameters.append(ParameterSpec(
            name=arg_name,
            parser=spec["parser"],
            description=spec.get("description", ""),
            positional=bool(spec.get("base", False)),
        ))
    return CommandDescriptor(name=name, description=description, execute=execute, parameters=parameters)
