"""
Command handler

Owns the command registry and the adapters serving it. Both adapters hold
the same registry object, so register_command() is visible to both at once.
"""

import asyncio
import logging
from typing import Iterable, Optional

from cmdseam.adapters.adapter_factory import AdapterFactory, AdapterType
from cmdseam.adapters.adapter_interface import ServerAdapterInterface
from cmdseam.commands.descriptor import CommandDescriptor
from cmdseam.commands.registry import CommandRegistry
from cmdseam.config import LineServerConfig, RpcServerConfig, ServiceConfig

logger = logging.getLogger(__name__)


class CommandHandler:
    """Registry plus the line and JSON-RPC front-ends serving it"""

    def __init__(self,
                 commands: Iterable[CommandDescriptor] = (),
                 line_config: Optional[LineServerConfig] = None,
                 rpc_config: Optional[RpcServerConfig] = None):
        """
        Args:
            commands: Initial command set (first definition of a name wins)
            line_config: Start the line protocol server when given
            rpc_config: Start the JSON-RPC server when given
        """
        self.registry = CommandRegistry(commands)
        self.line_config = line_config
        self.rpc_config = rpc_config
        self.line_server: Optional[ServerAdapterInterface] = None
        self.rpc_server: Optional[ServerAdapterInterface] = None

    @classmethod
    def from_config(cls, commands: Iterable[CommandDescriptor], config: ServiceConfig) -> "CommandHandler":
        return cls(commands, line_config=config.line, rpc_config=config.rpc)

    def register_command(self, descriptor: CommandDescriptor) -> bool:
        """Register a command at runtime

        Returns:
            bool: False if a command with that name already exists
        """
        return self.registry.register(descriptor)

    async def start(self) -> None:
        """Start the configured adapters

        Raises:
            TransportError: An adapter failed to bind
        """
        if self.line_config is not None:
            try:
                self.line_server = AdapterFactory.create_server(AdapterType.LINE, self.registry, self.line_config)
                await self.line_server.start()
            except Exception as e:
                logger.error(f"CommandHandler: Failed to start TCP CLI server: {e}")
                raise

        if self.rpc_config is not None:
            try:
                self.rpc_server = AdapterFactory.create_server(AdapterType.JSONRPC, self.registry, self.rpc_config)
                await self.rpc_server.start()
            except Exception as e:
                logger.error(f"CommandHandler: Failed to start JSON-RPC server: {e}")
                raise

    async def stop(self) -> None:
        """Stop every running adapter concurrently"""
        running = [server for server in (self.line_server, self.rpc_server)
                   if server is not None and server.is_running()]
        await asyncio.gather(*(server.stop() for server in running))

    def is_running(self) -> bool:
        return any(server is not None and server.is_running()
                   for server in (self.line_server, self.rpc_server))
