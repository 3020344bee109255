"""
In-process loopback transport

Delivers requests straight to JsonRpcService objects registered under a
destination name. Useful for tests and for embedding a service in the same
process as its client.
"""

import logging
from typing import Dict, Optional

from seam_jsonrpc.adapters.adapter_interface import TransportInterface, TransportShutdownError
from seam_jsonrpc.rpc.service import JsonRpcService

logger = logging.getLogger(__name__)


class LoopbackTransport(TransportInterface):
    """Transport that dispatches to local services by destination name"""

    def __init__(self, services: Optional[Dict[str, JsonRpcService]] = None):
        self.services: Dict[str, JsonRpcService] = dict(services or {})
        self._closed = False

    def register_service(self, destination: str, service: JsonRpcService):
        self.services[destination] = service

    def _service_for(self, destination: str) -> JsonRpcService:
        if self._closed:
            raise TransportShutdownError("Loopback transport is closed")
        service = self.services.get(destination)
        if service is None:
            raise ConnectionError(f"No service registered at {destination!r}")
        return service

    def send(self, destination: str, payload: bytes, timeout_ms: Optional[int] = None) -> bytes:
        reply = self._service_for(destination).handle_message(payload)
        if reply is None:
            # a call that the service treated as a notification never gets an answer
            raise TimeoutError(f"No reply from {destination!r}")
        return reply

    def publish(self, destination: str, payload: bytes) -> None:
        self._service_for(destination).handle_message(payload)

    def shutdown(self):
        """Simulate the transport going away underneath its users"""
        logger.info("Loopback transport shut down")
        self._closed = True

    def close(self):
        self._closed = True
