"""
JSON-RPC client error taxonomy

Every error raised by the client carries an ErrorKind so that callers can branch
on ``error.kind`` instead of walking the class hierarchy. Each class also derives
from the closest builtin exception (TimeoutError, ConnectionError, ValueError...)
so ordinary ``except`` clauses keep working.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Tag identifying the category of a client failure"""
    REMOTE_PROCEDURE = "remote_procedure"
    PROTOCOL_VIOLATION = "protocol_violation"
    COERCION = "coercion"
    UNKNOWN_TYPE = "unknown_type"
    PROCEDURE_NOT_FOUND = "procedure_not_found"
    MALFORMED_DESCRIPTION = "malformed_description"
    TIMEOUT = "timeout"
    TRANSPORT_IO = "transport_io"
    SESSION_STATE = "session_state"


class JsonRpcClientError(Exception):
    """Base class for all errors raised by seam_jsonrpc"""
    kind: ErrorKind


class RemoteProcedureError(JsonRpcClientError):
    """The remote peer answered with an ``error`` payload.

    The payload is kept exactly as decoded; ``code`` and ``message`` are read
    from it when it is a mapping.
    """
    kind = ErrorKind.REMOTE_PROCEDURE

    def __init__(self, error: Any):
        self.error = error
        if isinstance(error, dict):
            self.code = error.get("code")
            self.message = error.get("message")
        else:
            self.code = None
            self.message = None
        super().__init__(self.message if self.message is not None else repr(error))


class ProtocolViolationError(JsonRpcClientError, ValueError):
    """Reply text did not parse or carried neither ``result`` nor ``error``"""
    kind = ErrorKind.PROTOCOL_VIOLATION


class CoercionError(JsonRpcClientError, ValueError):
    """A textual value could not be converted to its declared type"""
    kind = ErrorKind.COERCION


class UnknownTypeError(JsonRpcClientError, ValueError):
    """A type tag outside {bit, num, str, arr, obj, any, nil}"""
    kind = ErrorKind.UNKNOWN_TYPE

    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"Bad type: {type_tag}")


class ProcedureNotFoundError(JsonRpcClientError, LookupError):
    """No procedure matches the requested (name, arity) pair"""
    kind = ErrorKind.PROCEDURE_NOT_FOUND

    def __init__(self, name: str, arity: int, detail: str = None):
        self.name = name
        self.arity = arity
        super().__init__(detail or f"No matching procedure: {name}/{arity}")


class MalformedDescriptionError(JsonRpcClientError, ValueError):
    """The service description mapping is missing keys or has wrong types"""
    kind = ErrorKind.MALFORMED_DESCRIPTION


class RpcTimeoutError(JsonRpcClientError, TimeoutError):
    """No reply arrived within the configured timeout"""
    kind = ErrorKind.TIMEOUT


class TransportIOError(JsonRpcClientError, ConnectionError):
    """Local transport failure, including a shutdown observed mid-call"""
    kind = ErrorKind.TRANSPORT_IO


class SessionStateError(JsonRpcClientError, RuntimeError):
    """The client is failed or closed and cannot issue requests"""
    kind = ErrorKind.SESSION_STATE
