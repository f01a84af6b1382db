"""
cmdseam: transport-agnostic command execution core

A registry of named commands, each with a declarative parameter schema,
served at the same time through:

1. Line protocol: interactive CLI-style sessions over TCP
2. JSON-RPC 2.0: stateless request/response exchanges over ZeroMQ

Both front-ends materialize wire input into the same typed arguments, call the
same command function and render the same error taxonomy in their own way.
"""

__version__ = "0.1.0"
