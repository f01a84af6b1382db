"""
Server adapter interface

Every front-end (line protocol, JSON-RPC) implements this interface on top of
the same shared CommandRegistry, so transports can be swapped or combined
without touching command code.
"""

import abc

from cmdseam.commands.registry import CommandRegistry


class ServerAdapterInterface(abc.ABC):
    """Server adapter interface, all front-ends must implement these methods"""

    def __init__(self, registry: CommandRegistry):
        # Shared by reference, never copied
        self.registry = registry

    @abc.abstractmethod
    async def start(self) -> None:
        """Bind the listener and begin serving

        Raises:
            TransportError: Bind failure or adapter already started
        """
        pass

    @abc.abstractmethod
    async def stop(self) -> None:
        """Stop accepting work, abandon in-flight work and release the listener"""
        pass

    @abc.abstractmethod
    def is_running(self) -> bool:
        pass
