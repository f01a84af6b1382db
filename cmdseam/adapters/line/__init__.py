"""
Line Protocol Adapter Package

Interactive newline-delimited text sessions over TCP: quoted tokenization,
``--flag`` handling, help listings and streamed command output.
"""

from cmdseam.adapters.line.client import LineClient
from cmdseam.adapters.line.server import LineServer

__all__ = ["LineClient", "LineServer"]
