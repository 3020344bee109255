"""
Tests for the server side JSON-RPC dispatcher
"""
import json
import pytest

from seam_jsonrpc.rpc.description import ParameterDescription, ServiceDescription
from seam_jsonrpc.rpc.service import (
    BAD_REQUEST,
    INTERNAL_ERROR,
    PROCEDURE_NOT_FOUND,
    JsonRpcService,
)


@pytest.fixture
def service():
    service = JsonRpcService("calculator", version="2.0")
    service.register_method("add", lambda a, b: a + b, params=[("a", "num"), ("b", "num")], return_type="num")
    service.register_method("add", lambda a, b, c: a + b + c, params=["a", "b", "c"])

    @service.procedure(summary="Fail on purpose")
    def explode():
        raise RuntimeError("kaboom")

    return service


def _call(service, request):
    reply = service.handle_message(json.dumps(request).encode('utf-8'))
    return None if reply is None else json.loads(reply)


class TestDescribe:
    """system.describe"""

    def test_describe_lists_procedures(self, service):
        reply = _call(service, {"method": "system.describe", "params": [], "id": None})
        description = ServiceDescription.from_dict(reply["result"])
        assert description.name == "calculator"
        assert description.version == "2.0"
        assert description.get_procedure("add", 2).param_types == ["num", "num"]
        assert description.get_procedure("add", 3).param_types == ["any", "any", "any"]
        assert description.get_procedure("explode", 0).summary == "Fail on purpose"
        assert description.has_procedure("system.describe", 0)

    def test_params_derived_from_signature(self, service):
        def greet(name, greeting="hello"):
            return f"{greeting} {name}"
        proc = service.register_method("greet", greet)
        assert proc.params == (ParameterDescription("name"), ParameterDescription("greeting"))


class TestDispatch:
    """Requests, notifications and error replies"""

    def test_call(self, service):
        reply = _call(service, {"method": "add", "params": [1, 2], "id": None, "jsonrpc": "1.1"})
        assert reply == {"id": None, "jsonrpc": "1.1", "result": 3}

    def test_dispatch_by_arity(self, service):
        assert _call(service, {"method": "add", "params": [1, 2, 3], "id": 7})["result"] == 6

    def test_unknown_procedure(self, service):
        reply = _call(service, {"method": "add", "params": [1], "id": None})
        assert reply["error"]["code"] == PROCEDURE_NOT_FOUND
        assert reply["error"]["name"] == "JSONRPCError"
        assert "result" not in reply

    def test_handler_failure(self, service):
        reply = _call(service, {"method": "explode", "params": [], "id": None})
        assert reply["error"]["code"] == INTERNAL_ERROR
        assert reply["error"]["error"] == {"type": "RuntimeError", "message": "kaboom"}

    def test_bad_request(self, service):
        reply = _call(service, {"method": "add", "params": {"a": 1}, "id": None})
        assert reply["error"]["code"] == BAD_REQUEST

    def test_parse_error(self, service):
        reply = json.loads(service.handle_message(b"{not json"))
        assert reply["error"]["code"] == BAD_REQUEST

    def test_notification_gets_no_reply(self, service):
        seen = []
        service.register_method("log", seen.append, params=[("message", "str")])
        assert _call(service, {"method": "log", "params": ["hi"]}) is None
        assert seen == ["hi"]

    def test_failing_notification_gets_no_reply(self, service):
        assert _call(service, {"method": "explode", "params": []}) is None

    def test_unserializable_result(self, service):
        service.register_method("opaque", lambda: object(), params=[])
        reply = _call(service, {"method": "opaque", "params": [], "id": None})
        assert reply["error"]["code"] == INTERNAL_ERROR

    def test_reply_without_version_tag(self):
        service = JsonRpcService("plain", include_version_tag=False)
        service.register_method("ping", lambda: "pong", params=[])
        assert _call(service, {"method": "ping", "params": [], "id": None}) == {"id": None, "result": "pong"}
