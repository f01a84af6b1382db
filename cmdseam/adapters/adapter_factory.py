"""
Adapter factory

Creates server adapters by type name, all wired to the same registry.
"""

from typing import Any

from cmdseam.adapters.adapter_interface import ServerAdapterInterface
from cmdseam.adapters.jsonrpc.server import JsonRpcServer
from cmdseam.adapters.line.server import LineServer
from cmdseam.commands.registry import CommandRegistry
from cmdseam.config import LineServerConfig, RpcServerConfig


class AdapterType:
    """Adapter type constants"""
    LINE = "line"
    JSONRPC = "jsonrpc"


class AdapterFactory:
    """Adapter factory, used to create server adapter instances"""

    @staticmethod
    def create_server(adapter_type: str, registry: CommandRegistry, config: Any = None) -> ServerAdapterInterface:
        """Create server adapter

        Args:
            adapter_type: "line" or "jsonrpc"
            registry: Shared command registry
            config: LineServerConfig / RpcServerConfig, defaults when None

        Returns:
            ServerAdapterInterface: Server adapter instance

        Raises:
            ValueError: Invalid adapter type or mismatched config
        """
        kind = adapter_type.lower()
        if kind == AdapterType.LINE:
            if config is not None and not isinstance(config, LineServerConfig):
                raise ValueError(f"Line adapter expects LineServerConfig, got {type(config).__name__}")
            return LineServer(registry, config)
        elif kind == AdapterType.JSONRPC:
            if config is not None and not isinstance(config, RpcServerConfig):
                raise ValueError(f"JSON-RPC adapter expects RpcServerConfig, got {type(config).__name__}")
            return JsonRpcServer(registry, config)
        else:
            raise ValueError(f"Invalid adapter type: {adapter_type}")
