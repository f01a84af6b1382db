"""
JSON-RPC client adapter

Implements a ZeroMQ-based JSON-RPC 2.0 client on a REQ socket.
"""

import asyncio
import json
import logging
import time
import uuid
from typing import Any, Dict, Optional, Union

import zmq
import zmq.asyncio

from cmdseam.adapters.jsonrpc.protocol import HEALTH_PROBE, JSONRPC_VERSION
from cmdseam.telemetry.metrics import increment_counter, record_latency
from cmdseam.telemetry.tracer import inject_trace_context

logger = logging.getLogger(__name__)

Params = Union[Dict[str, Any], list, None]


class JsonRpcClient:
    """ZeroMQ JSON-RPC 2.0 client"""

    def __init__(self, server_address: str = "tcp://127.0.0.1:4101", timeout_ms: int = 5000):
        """Initialize JSON-RPC client

        Args:
            server_address: ZeroMQ endpoint of the server
            timeout_ms: Reply timeout in milliseconds
        """
        self.server_address = server_address
        self.timeout_ms = timeout_ms
        self.context = zmq.asyncio.Context()
        self.socket = None
        self._connect()
        logger.info(f"JsonRpcClient connected to {server_address}")

    def _connect(self) -> None:
        self.socket = self.context.socket(zmq.REQ)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.connect(self.server_address)

    def _reset(self) -> None:
        # A REQ socket that missed its reply cannot send again
        self.socket.close()
        self._connect()

    def close(self) -> None:
        """Close the client connection"""
        if self.socket is not None:
            self.socket.close()
            self.socket = None
        if self.context is not None:
            self.context.term()
            self.context = None

    async def send_raw(self, payload: bytes) -> Dict[str, Any]:
        """Send an arbitrary payload and return the decoded reply

        Raises:
            TimeoutError: No reply within timeout_ms
        """
        if self.socket is None:
            raise ConnectionError("JsonRpcClient is closed")

        await self.socket.send(payload)
        try:
            reply = await asyncio.wait_for(self.socket.recv(), self.timeout_ms / 1000)
        except asyncio.TimeoutError:
            self._reset()
            increment_counter("rpc.client.errors", 1, {"type": "timeout"})
            raise TimeoutError(f"No reply from {self.server_address} within {self.timeout_ms}ms") from None
        return json.loads(reply.decode("utf-8"))

    async def call(self, method: str, params: Params = None, request_id: Any = None) -> Dict[str, Any]:
        """Send a JSON-RPC 2.0 request and wait for the response

        Args:
            method: Method name
            params: Positional (list) or named (dict) parameters; omitted when None
            request_id: Request id, a fresh UUID string by default

        Returns:
            Dict: The JSON-RPC response object

        Raises:
            TimeoutError: Request timed out
            ValueError: Response is not a JSON-RPC 2.0 response for this request
        """
        if request_id is None:
            request_id = str(uuid.uuid4())
        request: Dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method, "id": request_id}
        if params is not None:
            request["params"] = params

        trace_context = inject_trace_context()
        if trace_context:
            request["trace_context"] = trace_context

        start_time = time.time()
        increment_counter("rpc.client.requests", 1, {"method": method})
        response = await self.send_raw(json.dumps(request).encode("utf-8"))
        record_latency("rpc.client.latency", (time.time() - start_time) * 1000, {"method": method})

        if response.get("jsonrpc") != JSONRPC_VERSION:
            increment_counter("rpc.client.errors", 1, {"type": "invalid_response", "method": method})
            raise ValueError(f"Invalid JSON-RPC 2.0 response: {response}")
        if response.get("id") != request_id:
            increment_counter("rpc.client.errors", 1, {"type": "id_mismatch", "method": method})
            raise ValueError(f"Response id mismatch: {response.get('id')} != {request_id}")
        return response

    async def health(self) -> Dict[str, Any]:
        """Liveness probe"""
        return await self.send_raw(HEALTH_PROBE)
