"""
Server Adapters Module

Front-ends exposing the shared command registry:
- line: interactive line protocol over TCP
- jsonrpc: JSON-RPC 2.0 over ZeroMQ

Both parse their wire input through the same argument materializer and map
failures from the same error taxonomy.
"""

from .adapter_factory import AdapterFactory, AdapterType
from .adapter_interface import ServerAdapterInterface

__all__ = [
    "AdapterFactory",
    "AdapterType",
    "ServerAdapterInterface"
]
