"""
Command registry

A single registry instance is shared by reference between both adapters so a
command registered while they run becomes visible to them right away.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional

from cmdseam.commands.descriptor import CommandDescriptor
from cmdseam.errors import UnknownCommandError

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Insert-once mapping of command name to descriptor

    Writers are serialized by a lock. Readers do plain dict lookups, which
    never observe a partially inserted entry.
    """

    def __init__(self, commands: Iterable[CommandDescriptor] = ()):
        self._commands: Dict[str, CommandDescriptor] = {}
        self._lock = threading.RLock()
        for descriptor in commands:
            if not self.register(descriptor):
                logger.warning(f"Duplicate command '{descriptor.name}' ignored, keeping first definition")

    def register(self, descriptor: CommandDescriptor) -> bool:
        """Register a command

        Args:
            descriptor: Command to add

        Returns:
            bool: False if the name is already taken (registry unchanged)
        """
        with self._lock:
            if descriptor.name in self._commands:
                return False
            self._commands[descriptor.name] = descriptor
        logger.debug(f"Registered command: {descriptor.name}")
        return True

    def lookup(self, name: str) -> Optional[CommandDescriptor]:
        return self._commands.get(name)

    def resolve(self, name: str) -> CommandDescriptor:
        """Descriptor for ``name``

        Raises:
            UnknownCommandError: No command is registered under that name
        """
        descriptor = self._commands.get(name)
        if descriptor is None:
            raise UnknownCommandError(name)
        return descriptor

    def list_all(self) -> List[CommandDescriptor]:
        """All commands in registration order"""
        with self._lock:
            return list(self._commands.values())

    def names(self) -> List[str]:
        with self._lock:
            return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
