"""
JSON-RPC client

JSON-RPC services are self-describing: each lists its procedures and each
procedure describes its parameters and their types. A JsonRpcClient fetches
that description with ``system.describe`` when it connects and uses it to
coerce positional string arguments before calling.

Lifecycle::

    UNCONNECTED --describe()--> DESCRIBING --> READY
                                     |
                                     +--> FAILED   (error, timeout, shutdown)

    any state --close()--> CLOSED
"""

import time
import logging
from enum import Enum
from typing import Any, Optional, Sequence

from seam_jsonrpc.adapters.adapter_interface import TransportInterface, TransportShutdownError
from seam_jsonrpc.config import ClientConfig
from seam_jsonrpc.errors import (
    JsonRpcClientError,
    ProcedureNotFoundError,
    RpcTimeoutError,
    SessionStateError,
    TransportIOError,
)
from seam_jsonrpc.rpc.codec import EnvelopeCodec
from seam_jsonrpc.rpc.coercion import JsonValue, coerce_all
from seam_jsonrpc.rpc.description import ServiceDescription
from seam_jsonrpc.rpc.service import DESCRIBE_METHOD
from seam_jsonrpc.telemetry.metrics import increment_counter, record_latency
from seam_jsonrpc.telemetry.tracer import create_span, get_current_trace_context

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNCONNECTED = "unconnected"
    DESCRIBING = "describing"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class JsonRpcClient:
    """
    JSON-RPC client bound to one destination on a transport.

    Calls block until the reply arrives, the transport fails, or ``timeout_ms``
    elapses. The client adds no locking of its own; sharing it across threads is
    safe when the transport is.
    """

    def __init__(self,
                 transport: TransportInterface,
                 destination: str,
                 timeout_ms: Optional[int] = None,
                 check: bool = True,
                 include_version_tag: bool = True,
                 propagate_trace_context: bool = False):
        """Create a client and, if ``check`` is set, fetch the service description

        Args:
            transport: Transport used for requests and notifications
            destination: Transport destination of the service
            timeout_ms: Reply timeout in milliseconds, None waits forever
            check: Run the system.describe handshake now
            include_version_tag: Emit "jsonrpc": "1.1" in requests
            propagate_trace_context: Attach the current trace context to requests

        Raises:
            Whatever the handshake raised, e.g. RpcTimeoutError
        """
        self.transport = transport
        self.destination = destination
        self.timeout_ms = timeout_ms
        self.propagate_trace_context = propagate_trace_context
        self.codec = EnvelopeCodec(include_version_tag=include_version_tag)
        self.state = SessionState.UNCONNECTED
        self._service_description: Optional[ServiceDescription] = None

        if check:
            self.describe()

    @classmethod
    def from_config(cls, config: ClientConfig, transport: TransportInterface = None) -> "JsonRpcClient":
        """Create a client from a ClientConfig, building the transport if needed"""
        if transport is None:
            # imported here: the factory pulls in every adapter
            from seam_jsonrpc.adapters.adapter_factory import AdapterFactory
            transport = AdapterFactory.create_transport(config.adapter, config.to_dict())
        return cls(
            transport,
            config.endpoint,
            timeout_ms=config.timeout_ms,
            check=config.check_service,
            include_version_tag=config.include_version_tag,
            propagate_trace_context=config.propagate_trace_context,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def include_version_tag(self) -> bool:
        return self.codec.include_version_tag

    @property
    def service_description(self) -> Optional[ServiceDescription]:
        """The description loaded from the service, None before the handshake"""
        return self._service_description

    def describe(self) -> ServiceDescription:
        """Call system.describe and cache the parsed description

        Raises:
            SessionStateError: Handshake already completed or failed
        """
        if self.state is not SessionState.UNCONNECTED:
            raise SessionStateError(f"Cannot describe service in state {self.state.value}")

        self.state = SessionState.DESCRIBING
        try:
            raw = self.call(DESCRIBE_METHOD, None)
            description = ServiceDescription.from_dict(raw)
        except Exception:
            self.state = SessionState.FAILED
            raise

        self._service_description = description
        self.state = SessionState.READY
        logger.info(f"Service {description.name!r} at {self.destination} described "
                    f"({len(description.procedures)} procedures)")
        return description

    def _check_usable(self):
        if self.state in (SessionState.FAILED, SessionState.CLOSED):
            raise SessionStateError(f"Client is {self.state.value}")

    def _trace_context(self):
        if self.propagate_trace_context:
            return get_current_trace_context()
        return None

    def call(self, method: str, params: Optional[Sequence[Any]] = None) -> JsonValue:
        """Send a request and wait for its result

        Args:
            method: Remote procedure name
            params: Positional parameters

        Returns:
            The ``result`` member of the reply (may be None)

        Raises:
            RemoteProcedureError: The service returned an error
            ProtocolViolationError: The reply was not a valid envelope
            RpcTimeoutError: No reply within timeout_ms
            TransportIOError: The transport failed or shut down
        """
        self._check_usable()
        with create_span(f"jsonrpc.call {method}", {"rpc.system": "jsonrpc", "rpc.method": method}):
            payload = self.codec.encode_request(method, params, expect_reply=True,
                                                trace_context=self._trace_context())
            logger.debug(f"Sending request to {self.destination}: {payload[:200]}...")
            increment_counter("jsonrpc.client.requests", 1, {"method": method})
            start_time = time.time()

            try:
                try:
                    reply = self.transport.send(self.destination, payload, self.timeout_ms)
                except TimeoutError as e:
                    if isinstance(e, RpcTimeoutError):
                        raise
                    raise RpcTimeoutError(f"No reply to {method} within {self.timeout_ms}ms") from e
                except TransportShutdownError as e:
                    raise TransportIOError(f"Transport shut down during {method}: {e}") from e
                except OSError as e:
                    if isinstance(e, JsonRpcClientError):
                        raise
                    raise TransportIOError(f"Transport failure during {method}: {e}") from e

                latency_ms = (time.time() - start_time) * 1000
                record_latency("jsonrpc.client.latency", latency_ms, {"method": method})
                logger.debug(f"Received reply for {method}, latency: {latency_ms:.2f}ms")

                return self.codec.decode_reply(reply)
            except JsonRpcClientError as e:
                increment_counter("jsonrpc.client.errors", 1, {"type": e.kind.value, "method": method})
                raise

    def notify(self, method: str, params: Optional[Sequence[Any]] = None) -> None:
        """Publish a notification; no reply is expected or awaited

        Raises:
            TransportIOError: Local publish failure
        """
        self._check_usable()
        payload = self.codec.encode_request(method, params, expect_reply=False,
                                            trace_context=self._trace_context())
        logger.debug(f"Publishing notification to {self.destination}: {payload[:200]}...")
        try:
            self.transport.publish(self.destination, payload)
        except (TransportShutdownError, OSError) as e:
            increment_counter("jsonrpc.client.errors", 1, {"type": TransportIOError.kind.value, "method": method})
            raise TransportIOError(f"Failed to publish {method}: {e}") from e
        increment_counter("jsonrpc.client.notifications", 1, {"method": method})

    def call_by_positional_strings(self, args: Sequence[str]) -> JsonValue:
        """Call using ``args[0]`` as the method name and ``args[1:]`` as textual params

        Each param is coerced to the type the service declares for it.

        Raises:
            ProcedureNotFoundError: Empty args, no description, or no such name/arity
            CoercionError: A value does not fit its declared type
            UnknownTypeError: The service declares an unknown type tag
        """
        if not args:
            raise ProcedureNotFoundError("", 0, "First string argument must be method name")

        method = args[0]
        arity = len(args) - 1
        if self._service_description is None:
            raise ProcedureNotFoundError(method, arity, "No service description loaded")

        proc = self._service_description.get_procedure(method, arity)
        return self.call(method, coerce_all(args[1:], proc.params))

    def create_proxy(self, interface: type):
        """Return a stub implementing ``interface`` through this client"""
        from seam_jsonrpc.rpc.proxy import create_proxy
        return create_proxy(self, interface)

    def close(self):
        """Close the transport; the client cannot be used afterwards"""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self.transport.close()
