"""
Interface stubs for remote services

Instead of building method names and parameter lists by hand, describe the
remote service as a Python class and let create_proxy() generate a stub::

    class Calculator:
        def add(self, a, b) -> int: ...
        def log(self, message) -> None: ...        # notification

        @remote_method("system.describe")
        def describe(self) -> dict: ...

    calc = client.create_proxy(Calculator)
    calc.add(1, 2)

The binding table (remote name, arity, notify?) is resolved once when the stub
class is generated. Methods annotated ``-> None`` are sent as notifications.
"""

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Dict, Optional

_REMOTE_NAME_ATTR = "__jsonrpc_name__"


def remote_method(name: str):
    """Bind an interface method to a remote procedure with a different name"""
    def decorator(func):
        setattr(func, _REMOTE_NAME_ATTR, name)
        return func
    return decorator


@dataclass(frozen=True)
class MethodBinding:
    """How one interface method maps onto the wire"""
    remote_name: str
    arity: Optional[int]  # None when the method takes *args
    notify: bool


def _binding_for(attr_name: str, func) -> MethodBinding:
    signature = inspect.signature(func)
    params = list(signature.parameters.values())[1:]  # drop self

    arity = 0
    for param in params:
        if param.kind is param.VAR_POSITIONAL:
            arity = None
            break
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            arity += 1

    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        hints = getattr(func, "__annotations__", {})
    returns = hints.get("return", inspect.Signature.empty)
    # a string "None" survives when the hints could not be resolved
    notify = returns is None or returns is type(None) or returns == "None"

    return MethodBinding(
        remote_name=getattr(func, _REMOTE_NAME_ATTR, attr_name),
        arity=arity,
        notify=notify,
    )


def build_bindings(interface: type) -> Dict[str, MethodBinding]:
    """Resolve the binding table for every public method of ``interface``"""
    bindings = {}
    for attr_name, func in inspect.getmembers(interface, inspect.isfunction):
        if attr_name.startswith("_"):
            continue
        bindings[attr_name] = _binding_for(attr_name, func)
    return bindings


def _make_stub_method(attr_name: str, binding: MethodBinding):
    def stub(self, *args):
        if binding.arity is not None and len(args) != binding.arity:
            raise TypeError(f"{attr_name}() takes {binding.arity} positional arguments "
                            f"but {len(args)} were given")
        if binding.notify:
            self._client.notify(binding.remote_name, list(args))
            return None
        return self._client.call(binding.remote_name, list(args))

    stub.__name__ = attr_name
    stub.__qualname__ = attr_name
    return stub


def create_stub_class(interface: type) -> type:
    """Generate a subclass of ``interface`` whose public methods call the service"""
    bindings = build_bindings(interface)

    def __init__(self, client):
        self._client = client

    namespace: Dict[str, Any] = {
        "__init__": __init__,
        "__jsonrpc_bindings__": bindings,
        "__module__": interface.__module__,
    }
    for attr_name, binding in bindings.items():
        namespace[attr_name] = _make_stub_method(attr_name, binding)

    return type(f"{interface.__name__}Stub", (interface,), namespace)


def create_proxy(client, interface: type):
    """Instantiate a stub of ``interface`` backed by ``client``

    Args:
        client: JsonRpcClient (anything with call() and notify())
        interface: Class describing the remote procedures
    """
    return create_stub_class(interface)(client)
