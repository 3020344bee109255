"""
Communication Adapters Module

Transports the JSON-RPC client runs over, and servers hosting JSON-RPC services:
- zeromq: DEALER/ROUTER transport and server
- loopback: in-process transport for tests and embedding
"""

from .adapter_interface import ServerAdapterInterface, TransportInterface, TransportShutdownError
from .adapter_factory import AdapterFactory, AdapterType

__all__ = [
    "AdapterFactory",
    "AdapterType",
    "ServerAdapterInterface",
    "TransportInterface",
    "TransportShutdownError"
]
