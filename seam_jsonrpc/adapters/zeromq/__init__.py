"""
ZeroMQ Adapter Package

DEALER/ROUTER based transport and server for seam_jsonrpc.
"""

from seam_jsonrpc.adapters.zeromq.client import ZeroMQTransport
from seam_jsonrpc.adapters.zeromq.server import ZeroMQServer

__all__ = ["ZeroMQTransport", "ZeroMQServer"]
