"""
seam_jsonrpc - JSON-RPC over message transports

A JSON-RPC client that runs over any request/reply message transport:

1. Self-description: the service contract is fetched with ``system.describe``
2. Envelopes: {"method", "params", "id": null, "jsonrpc": "1.1"} requests,
   {"result"} / {"error"} replies
3. Adapters:
   - ZeroMQ DEALER/ROUTER transport and server
   - In-process loopback transport

Calls are traced and counted through OpenTelemetry.
"""

from seam_jsonrpc.config import ClientConfig
from seam_jsonrpc.errors import (
    ErrorKind,
    JsonRpcClientError,
    RemoteProcedureError,
    ProtocolViolationError,
    CoercionError,
    UnknownTypeError,
    ProcedureNotFoundError,
    MalformedDescriptionError,
    RpcTimeoutError,
    TransportIOError,
    SessionStateError,
)
from seam_jsonrpc.rpc.client import JsonRpcClient, SessionState
from seam_jsonrpc.rpc.coercion import coerce
from seam_jsonrpc.rpc.description import (
    ParameterDescription,
    ProcedureDescription,
    ServiceDescription,
)
from seam_jsonrpc.rpc.proxy import create_proxy, remote_method
from seam_jsonrpc.rpc.service import JsonRpcService

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ErrorKind",
    "JsonRpcClientError",
    "RemoteProcedureError",
    "ProtocolViolationError",
    "CoercionError",
    "UnknownTypeError",
    "ProcedureNotFoundError",
    "MalformedDescriptionError",
    "RpcTimeoutError",
    "TransportIOError",
    "SessionStateError",
    "JsonRpcClient",
    "SessionState",
    "coerce",
    "ParameterDescription",
    "ProcedureDescription",
    "ServiceDescription",
    "create_proxy",
    "remote_method",
    "JsonRpcService",
]
