"""
Configuration settings for the JSON-RPC client
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Connection and protocol settings for JsonRpcClient"""
    endpoint: str = "tcp://localhost:5555"
    adapter: str = "zeromq"  # zeromq, loopback
    timeout_ms: Optional[int] = None  # None waits forever
    check_service: bool = True  # run system.describe on connect
    include_version_tag: bool = True  # emit "jsonrpc": "1.1"

    # Tracing configuration
    propagate_trace_context: bool = False
    service_name: str = "seam.jsonrpc.client"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create config from SEAM_JSONRPC_* environment variables"""
        timeout = os.getenv("SEAM_JSONRPC_TIMEOUT_MS")
        return cls(
            endpoint=os.getenv("SEAM_JSONRPC_ENDPOINT", cls.endpoint),
            adapter=os.getenv("SEAM_JSONRPC_ADAPTER", cls.adapter),
            timeout_ms=int(timeout) if timeout else None,
            check_service=_env_bool("SEAM_JSONRPC_CHECK", True),
            include_version_tag=_env_bool("SEAM_JSONRPC_VERSION_TAG", True),
            propagate_trace_context=_env_bool("SEAM_JSONRPC_TRACE", False),
            service_name=os.getenv("SEAM_JSONRPC_SERVICE_NAME", cls.service_name),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "endpoint": self.endpoint,
            "adapter": self.adapter,
            "timeout_ms": self.timeout_ms,
            "check_service": self.check_service,
            "include_version_tag": self.include_version_tag,
            "propagate_trace_context": self.propagate_trace_context,
            "service_name": self.service_name,
        }
