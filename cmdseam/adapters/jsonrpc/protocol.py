"""
JSON-RPC 2.0 protocol definitions

Error codes, envelope validation and response builders. Nothing in here
touches a socket.
"""

import decimal
import json
from typing import Any, Dict, Optional

from cmdseam.errors import ProtocolEnvelopeError

JSONRPC_VERSION = "2.0"
HEALTH_PROBE = b"health"
HEALTH_PAYLOAD = {"status": "ok"}


class ErrorCode:
    """Standard JSON-RPC 2.0 error codes"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_ERROR = -32000


ERROR_MESSAGES = {
    ErrorCode.PARSE_ERROR: "Parse error",
    ErrorCode.INVALID_REQUEST: "Invalid Request",
    ErrorCode.METHOD_NOT_FOUND: "Method not found",
    ErrorCode.INVALID_PARAMS: "Invalid params",
    ErrorCode.INTERNAL_ERROR: "Internal error",
    ErrorCode.SERVER_ERROR: "Server error",
}


def is_valid_id(value: Any) -> bool:
    """``id`` may be null, a string or a number (booleans are not numbers)"""
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def success_response(result: Any, request_id: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def error_response(code: int,
                   request_id: Any = None,
                   message: Optional[str] = None,
                   data: Any = None) -> Dict[str, Any]:
    """Build a JSON-RPC error response object

    Args:
        code: One of ErrorCode
        request_id: Echoed request id (None when unknown)
        message: Overrides the standard message for ``code``
        data: Optional additional information
    """
    error: Dict[str, Any] = {"code": code, "message": message or ERROR_MESSAGES.get(code, "Server error")}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "error": error, "id": request_id}


def envelope_error_response(error: ProtocolEnvelopeError) -> Dict[str, Any]:
    return error_response(error.code, error.request_id, error.message, error.data)


def _parse_json_int(text: str) -> int:
    # Decimal keeps long integer literals clear of the int() digit limit
    return int(decimal.Decimal(text))


def decode_body(body: bytes) -> Any:
    """Decode a request body into a JSON document

    Raises:
        ProtocolEnvelopeError: PARSE_ERROR for undecodable or invalid JSON
    """
    try:
        return json.loads(body.decode("utf-8"), parse_int=_parse_json_int)
    except (UnicodeDecodeError, ValueError) as e:
        raise ProtocolEnvelopeError(ErrorCode.PARSE_ERROR, ERROR_MESSAGES[ErrorCode.PARSE_ERROR],
                                    request_id=None, data=str(e)) from e


def validate_request(document: Any) -> Dict[str, Any]:
    """Check a decoded document against the JSON-RPC 2.0 request shape

    Returns:
        Dict: The request object

    Raises:
        ProtocolEnvelopeError: INVALID_REQUEST for batches and malformed requests
    """
    if isinstance(document, list):
        raise ProtocolEnvelopeError(ErrorCode.INVALID_REQUEST, "Batch requests not supported")

    if not isinstance(document, dict):
        raise ProtocolEnvelopeError(ErrorCode.INVALID_REQUEST, ERROR_MESSAGES[ErrorCode.INVALID_REQUEST])

    request_id = document.get("id")
    echo_id = request_id if is_valid_id(request_id) else None

    valid = (
        document.get("jsonrpc") == JSONRPC_VERSION
        and isinstance(document.get("method"), str)
        and ("params" not in document or isinstance(document["params"], (list, dict)))
        and is_valid_id(request_id)
    )
    if not valid:
        raise ProtocolEnvelopeError(ErrorCode.INVALID_REQUEST, ERROR_MESSAGES[ErrorCode.INVALID_REQUEST],
                                    request_id=echo_id)
    return document
