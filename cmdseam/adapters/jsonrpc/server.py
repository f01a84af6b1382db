"""
JSON-RPC server adapter

Implements a ZeroMQ-based JSON-RPC 2.0 server on a ROUTER socket. Each
inbound message is one request/response exchange; every request runs in its
own asyncio task so a slow command never holds up the others.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Set

import zmq
import zmq.asyncio

from cmdseam.adapters.adapter_interface import ServerAdapterInterface
from cmdseam.adapters.jsonrpc.protocol import (
    HEALTH_PAYLOAD,
    HEALTH_PROBE,
    ErrorCode,
    decode_body,
    envelope_error_response,
    error_response,
    success_response,
    validate_request,
)
from cmdseam.commands.descriptor import noop_emit
from cmdseam.commands.materializer import execute_command
from cmdseam.commands.registry import CommandRegistry
from cmdseam.commands.sources import source_from_json_params
from cmdseam.config import RpcServerConfig
from cmdseam.errors import (
    ExecutionError,
    ParameterError,
    ProtocolEnvelopeError,
    TransportError,
    UnknownCommandError,
)
from cmdseam.telemetry.metrics import increment_counter, record_latency
from cmdseam.telemetry.tracer import create_span, extract_trace_context, with_trace_context
from cmdseam.utils.serialization import dumps, to_jsonable

logger = logging.getLogger(__name__)


class JsonRpcServer(ServerAdapterInterface):
    """ZeroMQ JSON-RPC 2.0 server adapter"""

    def __init__(self, registry: CommandRegistry, config: Optional[RpcServerConfig] = None):
        """Initialize JSON-RPC server

        Args:
            registry: Shared command registry
            config: Bind address and port
        """
        super().__init__(registry)
        self.config = config or RpcServerConfig()
        self.port: Optional[int] = None
        self.context: Optional[zmq.asyncio.Context] = None
        self.socket: Optional[zmq.asyncio.Socket] = None
        self._receiver: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def endpoint(self) -> Optional[str]:
        if self.port is None:
            return None
        return f"tcp://{self.config.address}:{self.port}"

    async def start(self) -> None:
        """Bind the ROUTER socket and start the receive loop"""
        if self.socket is not None:
            raise TransportError("JsonRpcServer: Server already started")

        self.context = zmq.asyncio.Context()
        socket = self.context.socket(zmq.ROUTER)
        socket.setsockopt(zmq.LINGER, 0)
        try:
            if self.config.port == 0:
                self.port = socket.bind_to_random_port(f"tcp://{self.config.address}")
            else:
                socket.bind(self.config.endpoint)
                self.port = self.config.port
        except zmq.ZMQError as e:
            socket.close()
            self.context.term()
            self.context = None
            logger.error(f"JsonRpcServer: failed to bind {self.config.endpoint}: {e}")
            raise TransportError(f"JsonRpcServer: cannot bind {self.config.endpoint}: {e}") from e

        self.socket = socket
        self._receiver = asyncio.create_task(self._receive_loop())
        increment_counter("rpc.server.started", 1)
        logger.info(f"JsonRpcServer: JSON-RPC server listening on {self.endpoint}")

    async def stop(self) -> None:
        """Stop receiving, abandon in-flight requests and close the socket"""
        if self.socket is None:
            return

        tasks = [self._receiver] + list(self._in_flight)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._receiver = None
        self._in_flight.clear()

        self.socket.close()
        self.socket = None
        self.context.term()
        self.context = None
        logger.info("JsonRpcServer: Server stopped")

    def is_running(self) -> bool:
        return self.socket is not None

    async def _receive_loop(self) -> None:
        logger.info("JsonRpcServer: receiving requests")
        while True:
            try:
                frames = await self.socket.recv_multipart()
            except zmq.ZMQError as e:
                increment_counter("rpc.server.errors", 1, {"type": "loop_error"})
                logger.error(f"JsonRpcServer: receive failed: {e}")
                await asyncio.sleep(0.1)
                continue

            if len(frames) < 2:
                logger.warning("JsonRpcServer: dropping message without routing envelope")
                continue

            increment_counter("rpc.server.requests.received", 1)
            # [identity, (empty delimiter,) body]: everything before the body is echoed back
            task = asyncio.create_task(self._serve_exchange(frames[:-1], frames[-1]))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def _serve_exchange(self, envelope: List[bytes], body: bytes) -> None:
        start_time = time.time()
        response = await self.handle_message(body)
        payload = self._encode(response)

        try:
            await self.socket.send_multipart(envelope + [payload])
        except zmq.ZMQError as e:
            increment_counter("rpc.server.errors", 1, {"type": "send_error"})
            logger.warning(f"JsonRpcServer: failed to send response: {e}")
            return

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.server.request.latency", latency_ms)
        logger.debug(f"JsonRpcServer: response sent in {latency_ms:.2f}ms")

    @staticmethod
    def _encode(response: Dict[str, Any]) -> bytes:
        try:
            return dumps(response).encode("utf-8")
        except (TypeError, ValueError) as e:
            increment_counter("rpc.server.errors", 1, {"type": "encode_error"})
            logger.error(f"JsonRpcServer: cannot encode response: {e}")
            fallback = error_response(ErrorCode.INTERNAL_ERROR, response.get("id"),
                                      data=f"Result could not be serialized: {e}")
            return dumps(fallback).encode("utf-8")

    async def handle_message(self, body: bytes) -> Dict[str, Any]:
        """Turn one raw request body into a response object

        Args:
            body: Raw message payload

        Returns:
            Dict: JSON-RPC response object, or the liveness payload for a health probe
        """
        if body.strip() == HEALTH_PROBE:
            return dict(HEALTH_PAYLOAD)

        try:
            request = validate_request(decode_body(body))
        except ProtocolEnvelopeError as e:
            increment_counter("rpc.server.errors", 1, {"type": "envelope_error"})
            logger.debug(f"JsonRpcServer: rejected request: {e}")
            return envelope_error_response(e)

        try:
            return await self.handle_request(request)
        except Exception as e:
            increment_counter("rpc.server.errors", 1, {"type": "internal_error"})
            logger.exception("JsonRpcServer: Unexpected error")
            return error_response(ErrorCode.INTERNAL_ERROR, request.get("id"), data=str(e))

    async def handle_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Dispatch a validated JSON-RPC request"""
        method = request["method"]
        request_id = request.get("id")

        try:
            descriptor = self.registry.resolve(method)
        except UnknownCommandError:
            increment_counter("rpc.server.errors", 1, {"type": "method_not_found", "method": method})
            return error_response(ErrorCode.METHOD_NOT_FOUND, request_id)

        trace_ctx = extract_trace_context(request.get("trace_context"))
        increment_counter("rpc.server.method.calls", 1, {"method": method})
        try:
            if "params" in request:
                source = source_from_json_params(request["params"])
            else:
                source = source_from_json_params()
            with with_trace_context(trace_ctx), create_span("rpc.dispatch", {"method": method}):
                result = await execute_command(descriptor, source, noop_emit)
        except ParameterError as e:
            increment_counter("rpc.server.errors", 1, {"type": "invalid_params", "method": method})
            return error_response(ErrorCode.INVALID_PARAMS, request_id, data=str(e))
        except ExecutionError as e:
            logger.error(f"JsonRpcServer: Command '{method}' execution error: {e.message}")
            increment_counter("rpc.server.method.errors", 1, {"method": method})
            return error_response(ErrorCode.SERVER_ERROR, request_id, data=e.message)

        return success_response(to_jsonable(result), request_id)
