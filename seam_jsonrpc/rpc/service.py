"""
JSON-RPC service dispatcher

Transport-independent server side: holds registered procedures, answers
``system.describe`` and turns request envelopes into reply envelopes. Server
adapters (ZeroMQ, loopback) feed it raw messages via handle_message().
"""

import json
import inspect
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from seam_jsonrpc.rpc.description import (
    JSON_RPC_VERSION,
    ParameterDescription,
    ProcedureDescription,
    ServiceDescription,
)
from seam_jsonrpc.telemetry.tracer import extract_trace_context, with_trace_context
from seam_jsonrpc.telemetry.metrics import increment_counter

logger = logging.getLogger(__name__)

DESCRIBE_METHOD = "system.describe"

# Error codes used in error replies
BAD_REQUEST = 400
PROCEDURE_NOT_FOUND = 404
INTERNAL_ERROR = 500

ParamSpec = Union[ParameterDescription, Tuple[str, str], str]


def error_payload(code: int, message: str, error: Any = None) -> Dict[str, Any]:
    return {
        "name": "JSONRPCError",
        "code": code,
        "message": message,
        "error": error,
    }


class JsonRpcService:
    """Registry of callable procedures with a self-description

    Procedures are keyed by (name, arity) and invoked with positional params.
    """

    def __init__(self,
                 name: str,
                 version: str = "1.0",
                 service_id: str = None,
                 summary: str = None,
                 include_version_tag: bool = True):
        self.name = name
        self.version = version
        self.service_id = service_id or f"urn:seam-jsonrpc:{name}"
        self.summary = summary
        self.include_version_tag = include_version_tag
        self._handlers: Dict[Tuple[str, int], Callable] = {}
        self._procedures: Dict[Tuple[str, int], ProcedureDescription] = {}
        self.register_method(DESCRIBE_METHOD, self._describe, params=[], return_type="obj",
                             summary="Return the service description", idempotent=True)

    def register_method(self,
                        name: str,
                        handler: Callable,
                        params: Optional[Iterable[ParamSpec]] = None,
                        return_type: str = "any",
                        summary: str = None,
                        idempotent: bool = False) -> ProcedureDescription:
        """Register a procedure handler

        Args:
            name: Procedure name
            handler: Callable invoked with the positional params
            params: Parameter schema as ParameterDescription, (name, type) pairs or
                bare names (type "any"); derived from the handler signature if None
            return_type: Declared return type tag
            summary: Human-readable summary
            idempotent: Whether repeated calls are safe

        Returns:
            ProcedureDescription: The registered description
        """
        if params is None:
            parameters = tuple(
                ParameterDescription(p.name)
                for p in inspect.signature(handler).parameters.values()
                if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
            )
        else:
            parameters = tuple(self._to_parameter(p) for p in params)

        proc = ProcedureDescription(
            name=name,
            params=parameters,
            return_type=return_type,
            summary=summary,
            idempotent=idempotent,
        )
        key = (name, proc.arity)
        self._handlers[key] = handler
        self._procedures[key] = proc
        logger.debug(f"Registered procedure: {name}/{proc.arity}")
        return proc

    def procedure(self, name: str = None, **kwargs):
        """Decorator form of register_method"""
        def decorator(func):
            self.register_method(name or func.__name__, func, **kwargs)
            return func
        return decorator

    @staticmethod
    def _to_parameter(spec: ParamSpec) -> ParameterDescription:
        if isinstance(spec, ParameterDescription):
            return spec
        if isinstance(spec, str):
            return ParameterDescription(spec)
        name, type_tag = spec
        return ParameterDescription(name, type_tag)

    def describe(self) -> ServiceDescription:
        return ServiceDescription(
            name=self.name,
            version=self.version,
            id=self.service_id,
            summary=self.summary,
            procedures=dict(self._procedures),
        )

    def _describe(self) -> Dict[str, Any]:
        return self.describe().to_dict()

    def _reply(self, request_id: Any, result: Any = None, error: Dict[str, Any] = None) -> Dict[str, Any]:
        reply = {"id": request_id}
        if self.include_version_tag:
            reply["jsonrpc"] = JSON_RPC_VERSION
        if error is not None:
            reply["error"] = error
        else:
            reply["result"] = result
        return reply

    def handle_request(self, request: Any) -> Optional[Dict[str, Any]]:
        """Dispatch a decoded request envelope

        Returns:
            Dict: Reply envelope, or None for notifications
        """
        if not isinstance(request, dict):
            increment_counter("jsonrpc.server.errors", 1, {"type": "invalid_request"})
            return self._reply(None, error=error_payload(BAD_REQUEST, "Bad Request", "Request must be an object"))

        # A request without an id member is a notification
        is_notification = "id" not in request
        request_id = request.get("id")
        method_name = request.get("method")
        params = request.get("params", [])
        if params is None:
            params = []

        if not isinstance(method_name, str) or not isinstance(params, list):
            increment_counter("jsonrpc.server.errors", 1, {"type": "invalid_request"})
            if is_notification:
                return None
            return self._reply(request_id, error=error_payload(BAD_REQUEST, "Bad Request",
                                                               "method must be a string and params an array"))

        handler = self._handlers.get((method_name, len(params)))
        if handler is None:
            increment_counter("jsonrpc.server.errors", 1, {"type": "procedure_not_found", "method": method_name})
            if is_notification:
                logger.debug(f"Dropping notification for unknown procedure {method_name}/{len(params)}")
                return None
            return self._reply(request_id, error=error_payload(PROCEDURE_NOT_FOUND, "Procedure not found",
                                                               f"{method_name}/{len(params)}"))

        trace_context = extract_trace_context(request.get("trace_context"))
        try:
            with with_trace_context(trace_context):
                increment_counter("jsonrpc.server.method.calls", 1, {"method": method_name})
                result = handler(*params)
        except Exception as e:
            logger.error(f"Error executing procedure {method_name}: {e}")
            increment_counter("jsonrpc.server.method.errors", 1, {"method": method_name})
            if is_notification:
                return None
            return self._reply(request_id, error=error_payload(INTERNAL_ERROR, "Internal Server Error",
                                                               {"type": type(e).__name__, "message": str(e)}))

        if is_notification:
            increment_counter("jsonrpc.server.notifications", 1, {"method": method_name})
            return None
        return self._reply(request_id, result=result)

    def handle_message(self, payload: bytes) -> Optional[bytes]:
        """Decode a raw request, dispatch it and encode the reply

        Returns:
            bytes: Encoded reply, or None when no reply should be sent
        """
        try:
            request = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"JSON parse error: {e}")
            increment_counter("jsonrpc.server.errors", 1, {"type": "parse_error"})
            reply = self._reply(None, error=error_payload(BAD_REQUEST, "Bad Request", "Parse error"))
            return json.dumps(reply).encode('utf-8')

        logger.debug(f"Received request: {payload[:200]}...")
        reply = self.handle_request(request)
        if reply is None:
            return None
        try:
            return json.dumps(reply).encode('utf-8')
        except (TypeError, ValueError) as e:
            logger.error(f"Result of {request.get('method')} is not JSON serializable: {e}")
            increment_counter("jsonrpc.server.errors", 1, {"type": "unserializable_result"})
            reply = self._reply(reply.get("id"), error=error_payload(INTERNAL_ERROR, "Internal Server Error",
                                                                     f"Unserializable result: {e}"))
            return json.dumps(reply).encode('utf-8')
