"""
JSON-RPC Adapter Package

Stateless JSON-RPC 2.0 exchanges over a ZeroMQ ROUTER socket, plus the
matching REQ client.
"""

from cmdseam.adapters.jsonrpc.client import JsonRpcClient
from cmdseam.adapters.jsonrpc.protocol import ErrorCode
from cmdseam.adapters.jsonrpc.server import JsonRpcServer

__all__ = ["ErrorCode", "JsonRpcClient", "JsonRpcServer"]
