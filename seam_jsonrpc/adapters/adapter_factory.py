"""
Adapter factory

Creates transport and server adapters (ZeroMQ, loopback) from a type name and
a configuration dictionary.
"""

from typing import Dict, Any

from seam_jsonrpc.adapters.adapter_interface import ServerAdapterInterface, TransportInterface
from seam_jsonrpc.adapters.loopback.transport import LoopbackTransport
from seam_jsonrpc.adapters.zeromq.client import ZeroMQTransport
from seam_jsonrpc.adapters.zeromq.server import ZeroMQServer
from seam_jsonrpc.rpc.service import JsonRpcService

class AdapterType:
    """Adapter type constants"""
    ZEROMQ = "zeromq"
    LOOPBACK = "loopback"

class AdapterFactory:
    """Factory for communication adapters"""

    @staticmethod
    def create_transport(adapter_type: str, config: Dict[str, Any] = None) -> TransportInterface:
        """Create a client transport

        Args:
            adapter_type: "zeromq" or "loopback"
            config: Adapter settings ("linger_ms" for ZeroMQ, "services" for loopback)

        Returns:
            TransportInterface: Transport instance

        Raises:
            ValueError: Unknown adapter type
        """
        if config is None:
            config = {}

        if adapter_type.lower() == AdapterType.ZEROMQ:
            return ZeroMQTransport(linger_ms=config.get("linger_ms", 0))
        elif adapter_type.lower() == AdapterType.LOOPBACK:
            return LoopbackTransport(services=config.get("services"))
        else:
            raise ValueError(f"Invalid adapter type: {adapter_type}")

    @staticmethod
    def create_server(adapter_type: str, service: JsonRpcService, config: Dict[str, Any] = None) -> ServerAdapterInterface:
        """Create a server adapter hosting ``service``

        Raises:
            ValueError: Unknown or client-only adapter type
        """
        if config is None:
            config = {}

        if adapter_type.lower() == AdapterType.ZEROMQ:
            return ZeroMQServer(
                service,
                bind_address=config.get("bind_address", "tcp://*:5555")
            )
        else:
            raise ValueError(f"Invalid server adapter type: {adapter_type}")
