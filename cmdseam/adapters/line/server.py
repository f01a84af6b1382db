"""
Line protocol server adapter

Interactive CLI-style sessions over TCP. Every connection gets a banner and a
prompt, then each input line is tokenized, resolved against the registry,
materialized and executed. Output written through ``emit`` is streamed to the
client while the command runs.
"""

import asyncio
import logging
import time
from typing import Optional, Set

from cmdseam.adapters.adapter_interface import ServerAdapterInterface
from cmdseam.adapters.line import rendering
from cmdseam.adapters.line.tokenizer import merge_arguments, split_flags, tokenize
from cmdseam.commands.materializer import execute_command
from cmdseam.commands.registry import CommandRegistry
from cmdseam.commands.sources import NamedValues
from cmdseam.config import LineServerConfig
from cmdseam.errors import ExecutionError, ParameterError, TransportError, UnknownCommandError
from cmdseam.telemetry.metrics import increment_counter, record_latency
from cmdseam.telemetry.tracer import create_span
from cmdseam.utils.serialization import format_for_cli

logger = logging.getLogger(__name__)

PROMPT = "> "
HELP_BANNER = "Type 'help' to get a summary of existing commands!"


class LineServer(ServerAdapterInterface):
    """TCP line protocol server backed by asyncio streams"""

    def __init__(self, registry: CommandRegistry, config: Optional[LineServerConfig] = None):
        """Initialize line server

        Args:
            registry: Shared command registry
            config: Bind address, port and intro banner
        """
        super().__init__(registry)
        self.config = config or LineServerConfig()
        self.port: Optional[int] = None
        self._server: Optional[asyncio.AbstractServer] = None
        self._sessions: Set[asyncio.Task] = set()
        self._writers: Set[asyncio.StreamWriter] = set()

    async def start(self) -> None:
        """Bind and start accepting connections"""
        if self._server is not None:
            raise TransportError("LineServer: Server already started")

        try:
            self._server = await asyncio.start_server(
                self._on_connect, host=self.config.address, port=self.config.port
            )
        except OSError as e:
            logger.error(f"LineServer: failed to bind {self.config.address}:{self.config.port}: {e}")
            raise TransportError(f"LineServer: cannot bind {self.config.address}:{self.config.port}: {e}") from e

        self.port = self._server.sockets[0].getsockname()[1]
        logger.info(f"LineServer: TCP CLI server listening on {self.config.address}:{self.port}")

    async def stop(self) -> None:
        """Stop listening, close open sessions and release the socket"""
        if self._server is None:
            return

        server, self._server = self._server, None
        server.close()

        for writer in list(self._writers):
            writer.close()
        sessions = list(self._sessions)
        for task in sessions:
            task.cancel()
        if sessions:
            await asyncio.gather(*sessions, return_exceptions=True)

        await server.wait_closed()
        logger.info("LineServer: Server stopped")

    def is_running(self) -> bool:
        return self._server is not None

    async def _on_connect(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        # asyncio runs each connection callback in its own task
        task = asyncio.current_task()
        self._sessions.add(task)
        self._writers.add(writer)
        try:
            await self._serve_connection(reader, writer)
        finally:
            self._sessions.discard(task)
            self._writers.discard(writer)

    async def _serve_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        peer = writer.get_extra_info("peername")
        increment_counter("line.server.connections", 1)
        logger.debug(f"LineServer: connection from {peer}")

        try:
            writer.write(f"{self.config.intro_message}\n{HELP_BANNER}\n{PROMPT}".encode("utf-8"))
            await writer.drain()

            while True:
                try:
                    raw = await reader.readuntil(b"\n")
                except asyncio.IncompleteReadError as e:
                    # Unterminated last line before EOF
                    raw = e.partial
                    if not raw:
                        break
                except asyncio.LimitOverrunError as e:
                    increment_counter("line.server.errors", 1, {"type": "line_too_long"})
                    logger.warning(f"LineServer: discarding over-long line from {peer}")
                    if not await self._discard_line(reader, e.consumed):
                        break
                    writer.write(f"{rendering.LINE_TOO_LONG}\n{PROMPT}".encode("utf-8"))
                    await writer.drain()
                    continue

                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                response = await self._dispatch(line, writer)
                writer.write(f"{response}\n{PROMPT}".encode("utf-8"))
                await writer.drain()
        except OSError as e:
            increment_counter("line.server.errors", 1, {"type": "socket_error"})
            logger.warning(f"LineServer: Socket error from {peer}: {e}")
        except Exception:
            increment_counter("line.server.errors", 1, {"type": "session_error"})
            logger.exception(f"LineServer: Unexpected error serving {peer}")
        finally:
            writer.close()
            logger.debug(f"LineServer: connection from {peer} closed")

    async def _dispatch(self, line: str, writer: asyncio.StreamWriter) -> str:
        try:
            return await self.handle_line(line, lambda text: self._emit(writer, text))
        except Exception as e:
            # Keeps the session alive, e.g. when a result cannot be rendered
            increment_counter("line.server.errors", 1, {"type": "dispatch_error"})
            logger.exception(f"LineServer: Unexpected error handling line {line[:80]!r}")
            return rendering.execution_error(str(e) or type(e).__name__)

    @staticmethod
    async def _discard_line(reader: asyncio.StreamReader, consumed: int) -> bool:
        """Drop the rest of a line longer than the reader limit

        Returns:
            bool: False when the peer closed the connection first
        """
        try:
            while True:
                await reader.readexactly(consumed)
                try:
                    await reader.readuntil(b"\n")
                    return True
                except asyncio.LimitOverrunError as e:
                    consumed = e.consumed
        except asyncio.IncompleteReadError:
            return False

    @staticmethod
    def _emit(writer: asyncio.StreamWriter, text: str) -> None:
        if writer.is_closing():
            return
        writer.write(f"{text}\n".encode("utf-8"))

    async def handle_line(self, line: str, emit) -> str:
        """Dispatch one input line and render the response text

        Args:
            line: Input line without its terminator
            emit: Streaming output sink passed to the command

        Returns:
            str: Text to send back before the next prompt
        """
        if line == "":
            return ""

        tokens = tokenize(line)
        if not tokens:
            return ""

        name = tokens[0]
        if name == "help":
            if len(tokens) > 1:
                target = self.registry.lookup(tokens[1])
                if target is not None:
                    return rendering.command_help(target)
            return rendering.general_help(self.registry.list_all())

        try:
            descriptor = self.registry.resolve(name)
        except UnknownCommandError:
            increment_counter("line.server.errors", 1, {"type": "unknown_command"})
            return rendering.UNKNOWN_COMMAND

        source = NamedValues(merge_arguments(descriptor, split_flags(tokens[1:])))

        start_time = time.time()
        increment_counter("line.server.commands", 1, {"command": name})
        try:
            with create_span("line.dispatch", {"command": name}):
                result = await execute_command(descriptor, source, emit)
        except ParameterError as e:
            increment_counter("line.server.errors", 1, {"type": "invalid_params"})
            return rendering.parameter_error(e, descriptor)
        except ExecutionError as e:
            increment_counter("line.server.errors", 1, {"type": "execution_error"})
            return rendering.execution_error(e.message)
        finally:
            record_latency("line.server.command.latency", (time.time() - start_time) * 1000, {"command": name})

        return format_for_cli(result)
