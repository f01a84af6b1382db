"""
Shared fixtures: a small command set used across the adapter tests
"""

import asyncio

import pytest

from cmdseam.commands.descriptor import ParameterSpec, CommandDescriptor, create_command
from cmdseam.commands.parsers import enum_parser, number_parser, string_parser
from cmdseam.commands.registry import CommandRegistry


async def _add(args, emit):
    return args["a"] + args["b"]


async def _echo(args, emit):
    return {"text": args["text"], "times": args["times"]}


async def _stream(args, emit):
    for i in range(args["count"]):
        emit(f"line {i}")
    return "done"


async def _fail(args, emit):
    raise RuntimeError("boom")


async def _sleep(args, emit):
    await asyncio.sleep(args["seconds"])
    return "slept"


async def _mode(args, emit):
    return args["mode"]


def build_commands():
    """Fresh descriptors for the test command set"""
    return [
        CommandDescriptor(
            name="add",
            description="Add two integers",
            execute=_add,
            parameters=[
                ParameterSpec("a", number_parser(), "First operand", positional=True),
                ParameterSpec("b", number_parser(), "Second operand"),
            ],
        ),
        create_command("echo", "Echo text back", {
            "text": {"base": True, "description": "Text to echo", "parser": string_parser(min_length=1)},
            "times": {"description": "Repeat count", "parser": number_parser(min_value=1, max_value=5, optional=True)},
        }, _echo),
        create_command("stream", "Emit numbered lines", {
            "count": {"base": True, "description": "Number of lines", "parser": number_parser(min_value=0, max_value=10)},
        }, _stream),
        create_command("fail", "Always fails", {}, _fail),
        create_command("sleep", "Sleep for a while", {
            "seconds": {"base": True, "description": "Seconds", "parser": number_parser(decimal=True, min_value=0)},
        }, _sleep),
        create_command("mode", "Pick a mode", {
            "mode": {"base": True, "description": "x or y", "parser": enum_parser(["x", "y"])},
        }, _mode),
    ]


@pytest.fixture
def registry():
    """Registry populated with the test command set"""
    return CommandRegistry(build_commands())
