"""
JSON-RPC envelope codec

Builds request/notification envelopes and validates reply envelopes.

Request:  {"method": <str>, "params": <array>, "id": null, "jsonrpc": "1.1"}
Reply:    {"result": <any>} or {"error": <object>}

Calls carry ``"id": null``; reply correlation belongs to the transport.
Notifications omit ``id`` and get no reply.
"""

import json
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from seam_jsonrpc.errors import ProtocolViolationError, RemoteProcedureError
from seam_jsonrpc.rpc.coercion import JsonValue
from seam_jsonrpc.rpc.description import JSON_RPC_VERSION


def check_reply(reply: Any) -> JsonValue:
    """Extract the result from a decoded reply mapping

    Raises:
        RemoteProcedureError: The reply carries an ``error`` payload
        ProtocolViolationError: The reply is not a mapping or has neither key
    """
    if not isinstance(reply, Mapping):
        raise ProtocolViolationError(f"Reply must be a JSON object, got {type(reply).__name__}")
    # JSON-RPC 1.0 peers send "error": null alongside a result
    if reply.get("error") is not None:
        raise RemoteProcedureError(reply["error"])
    if "result" not in reply:
        raise ProtocolViolationError("Reply has neither result nor error")
    return reply["result"]


class EnvelopeCodec:
    """Encodes requests and decodes replies

    ``include_version_tag`` controls whether the ``jsonrpc`` member is written;
    turn it off for peers that predate versioned envelopes.
    """

    def __init__(self, include_version_tag: bool = True):
        self.include_version_tag = include_version_tag

    def build_request(self,
                      method: str,
                      params: Optional[Sequence[Any]] = None,
                      expect_reply: bool = True,
                      trace_context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build the request mapping for a call or a notification"""
        request = {
            "method": method,
            "params": [] if params is None else list(params),
        }
        if expect_reply:
            request["id"] = None
        if self.include_version_tag:
            request["jsonrpc"] = JSON_RPC_VERSION
        if trace_context:
            request["trace_context"] = trace_context
        return request

    def encode_request(self,
                       method: str,
                       params: Optional[Sequence[Any]] = None,
                       expect_reply: bool = True,
                       trace_context: Optional[Dict[str, Any]] = None) -> bytes:
        """Encode a request envelope to UTF-8 JSON bytes

        Args:
            method: Remote procedure name
            params: Positional parameters, None for none
            expect_reply: True for a call, False for a notification
            trace_context: Optional trace context to propagate

        Returns:
            bytes: Encoded envelope
        """
        request = self.build_request(method, params, expect_reply, trace_context)
        return json.dumps(request, allow_nan=False).encode('utf-8')

    def decode_reply(self, data: Union[bytes, str]) -> JsonValue:
        """Decode a reply envelope and return its result

        Raises:
            RemoteProcedureError: The peer returned an error payload
            ProtocolViolationError: Undecodable text or an invalid envelope
        """
        try:
            if isinstance(data, bytes):
                data = data.decode('utf-8')
            reply = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProtocolViolationError(f"Reply is not valid JSON: {e}") from e
        return check_reply(reply)
