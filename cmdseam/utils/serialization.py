"""
Result serialization tools

Converts command results into JSON for the RPC wire and into readable text
for the line protocol.
"""

import dataclasses
import enum
import json
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Convert a command result into plain JSON-compatible data

    Dataclasses become dicts, enums their value, sets and tuples lists.
    Anything else unknown is rendered with str().
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, enum.Enum):
        return to_jsonable(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


def dumps(value: Any) -> str:
    """Compact JSON encoding for the wire"""
    return json.dumps(to_jsonable(value), ensure_ascii=False)


def format_for_cli(value: Any) -> str:
    """Human-readable rendering: strings as-is, everything else as indented JSON"""
    if isinstance(value, str):
        return value
    return json.dumps(to_jsonable(value), indent=2, ensure_ascii=False)
