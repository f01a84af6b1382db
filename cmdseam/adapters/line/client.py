"""
Line protocol client

Small asyncio client for the line protocol, handy for scripting a session.
"""

import asyncio
import logging
from typing import Optional

from cmdseam.adapters.line.server import PROMPT

logger = logging.getLogger(__name__)

_PROMPT_MARKER = ("\n" + PROMPT).encode("utf-8")


class LineClient:
    """Line protocol client over asyncio streams"""

    def __init__(self, host: str = "127.0.0.1", port: int = 4100, timeout: float = 5.0):
        """Initialize line client

        Args:
            host: Server host
            port: Server port
            timeout: Seconds to wait for the next prompt
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    async def connect(self) -> str:
        """Open the connection and return the banner (without the prompt)"""
        self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        logger.debug(f"LineClient connected to {self.host}:{self.port}")
        return await self._read_until_prompt()

    async def send(self, line: str) -> str:
        """Send one line and return everything the server wrote before the next prompt

        Streamed ``emit`` lines come first, followed by the rendered result.
        """
        if self._writer is None:
            raise ConnectionError("LineClient is not connected")
        self._writer.write((line + "\n").encode("utf-8"))
        await self._writer.drain()
        return await self._read_until_prompt()

    async def _read_until_prompt(self) -> str:
        data = await asyncio.wait_for(self._reader.readuntil(_PROMPT_MARKER), self.timeout)
        return data[:-len(_PROMPT_MARKER)].decode("utf-8")

    async def close(self) -> None:
        if self._writer is None:
            return
        writer, self._writer, self._reader = self._writer, None, None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"LineClient close: {e}")
