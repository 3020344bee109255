"""
Tests for generated interface stubs
"""
import abc
import pytest
from unittest.mock import MagicMock

from seam_jsonrpc.adapters.loopback.transport import LoopbackTransport
from seam_jsonrpc.rpc.client import JsonRpcClient
from seam_jsonrpc.rpc.proxy import build_bindings, create_proxy, create_stub_class, remote_method
from seam_jsonrpc.rpc.service import JsonRpcService


class Calculator:
    """Remote calculator interface"""

    def add(self, a, b) -> int:
        ...

    def total(self, *values) -> float:
        ...

    def log(self, message) -> None:
        ...

    def untyped(self, value):
        ...

    @remote_method("system.describe")
    def describe(self) -> dict:
        ...

    def _private(self):
        ...


class Journal:
    """Interface whose annotations cannot all be resolved"""

    def log(self, message: "Undefined") -> "None":  # noqa: F821
        ...

    def count(self) -> "int":
        ...


class AbstractCalculator(abc.ABC):
    @abc.abstractmethod
    def add(self, a, b) -> int:
        ...


class TestBindings:
    """Binding table resolved from the interface"""

    def test_bindings(self):
        bindings = build_bindings(Calculator)
        assert set(bindings) == {"add", "total", "log", "untyped", "describe"}
        assert bindings["add"].remote_name == "add"
        assert bindings["add"].arity == 2
        assert bindings["add"].notify is False
        assert bindings["total"].arity is None
        assert bindings["log"].notify is True
        assert bindings["untyped"].notify is False
        assert bindings["describe"].remote_name == "system.describe"
        assert bindings["describe"].arity == 0

    def test_string_none_annotation_notifies(self):
        bindings = build_bindings(Journal)
        assert bindings["log"].notify is True
        assert bindings["count"].notify is False

    def test_string_none_annotation_sends_no_call(self):
        client = MagicMock()
        journal = create_proxy(client, Journal)
        assert journal.log("entry") is None
        client.notify.assert_called_once_with("log", ["entry"])
        client.call.assert_not_called()

    def test_stub_is_an_interface_instance(self):
        stub = create_proxy(MagicMock(), Calculator)
        assert isinstance(stub, Calculator)
        assert type(stub).__name__ == "CalculatorStub"

    def test_abstract_interface_is_implemented(self):
        stub = create_stub_class(AbstractCalculator)(MagicMock())
        assert isinstance(stub, AbstractCalculator)


class TestDispatch:
    """Routing to call() and notify()"""

    def test_value_method_calls(self):
        client = MagicMock()
        client.call.return_value = 3
        calc = create_proxy(client, Calculator)
        assert calc.add(1, 2) == 3
        client.call.assert_called_once_with("add", [1, 2])
        client.notify.assert_not_called()

    def test_void_method_notifies(self):
        client = MagicMock()
        calc = create_proxy(client, Calculator)
        assert calc.log("hello") is None
        client.notify.assert_called_once_with("log", ["hello"])
        client.call.assert_not_called()

    def test_varargs(self):
        client = MagicMock()
        calc = create_proxy(client, Calculator)
        calc.total(1, 2, 3, 4)
        client.call.assert_called_once_with("total", [1, 2, 3, 4])

    def test_renamed_method(self):
        client = MagicMock()
        create_proxy(client, Calculator).describe()
        client.call.assert_called_once_with("system.describe", [])

    def test_wrong_arity_is_rejected_locally(self):
        client = MagicMock()
        calc = create_proxy(client, Calculator)
        with pytest.raises(TypeError):
            calc.add(1)
        client.call.assert_not_called()


def test_proxy_through_client():
    seen = []
    service = JsonRpcService("calc")
    service.register_method("add", lambda a, b: a + b, params=[("a", "num"), ("b", "num")])
    service.register_method("log", seen.append, params=[("message", "str")])
    client = JsonRpcClient(LoopbackTransport({"calc": service}), "calc")

    calc = client.create_proxy(Calculator)
    assert calc.add(20, 22) == 42
    calc.log("done")
    assert seen == ["done"]
    assert calc.describe()["name"] == "calc"
