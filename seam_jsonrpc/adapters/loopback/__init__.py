"""
Loopback Adapter Package

In-process transport delivering requests directly to JsonRpcService objects.
"""

from seam_jsonrpc.adapters.loopback.transport import LoopbackTransport

__all__ = ["LoopbackTransport"]
