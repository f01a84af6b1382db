#!/usr/bin/env python
"""
Command Server Example

Serves a small command set over both the line protocol and JSON-RPC.
Configuration comes from CMDSEAM_* environment variables.

    telnet 127.0.0.1 4100
    > add 2 --b 3
"""

import asyncio
import logging
import signal
from typing import Any, Dict

from cmdseam.commands import create_command, enum_parser, number_parser, string_parser
from cmdseam.config import ServiceConfig
from cmdseam.handler import CommandHandler
from cmdseam.telemetry.metrics import increment_counter, setup_metrics
from cmdseam.telemetry.tracer import setup_tracer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def add(args: Dict[str, Any], emit) -> float:
    return args["a"] + args["b"]


async def countdown(args: Dict[str, Any], emit) -> str:
    """Emit one line per second, then finish"""
    for remaining in range(args["from"], 0, -1):
        emit(f"{remaining}...")
        await asyncio.sleep(1)
    increment_counter("example.countdowns", 1)
    return "liftoff"


def greet(args: Dict[str, Any], emit) -> Dict[str, Any]:
    name = args["name"]
    if args["style"] == "loud":
        name = name.upper()
    return {"greeting": f"Hello, {name}!", "style": args["style"]}


COMMANDS = [
    create_command("add", "Add two numbers", {
        "a": {"base": True, "description": "First operand", "parser": number_parser(decimal=True)},
        "b": {"base": True, "description": "Second operand", "parser": number_parser(decimal=True)},
    }, add),
    create_command("countdown", "Count down to zero", {
        "from": {"base": True, "description": "Starting value",
                 "parser": number_parser(min_value=1, max_value=10)},
    }, countdown),
    create_command("greet", "Greet someone", {
        "name": {"base": True, "description": "Who to greet", "parser": string_parser(min_length=1)},
        "style": {"description": "Greeting style", "parser": enum_parser(["plain", "loud"])},
    }, greet),
]


async def run(config: ServiceConfig):
    handler = CommandHandler.from_config(COMMANDS, config)
    await handler.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    logger.info("Command server running, press Ctrl+C to stop")
    await stop_event.wait()

    logger.info("Received exit signal, stopping server...")
    await handler.stop()
    logger.info("Server stopped")


def main():
    """Start command server example"""
    config = ServiceConfig.from_env()
    logger.info(f"Configuration: {config.to_dict()}")

    if config.enable_tracing:
        setup_tracer(config.service_name, config.otlp_endpoint)
        setup_metrics(config.service_name, config.otlp_endpoint)

    asyncio.run(run(config))


if __name__ == "__main__":
    main()
