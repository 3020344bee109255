"""
Transport adapter interfaces

Every transport (ZeroMQ, in-process loopback) implements the same contract, so
the JSON-RPC client does not change when the underlying messaging does.
"""

import abc
from typing import Optional


class TransportShutdownError(Exception):
    """The transport was shut down or the peer disconnected"""


class TransportInterface(abc.ABC):
    """Client side transport: delivers request bytes and returns reply bytes"""

    @abc.abstractmethod
    def send(self, destination: str, payload: bytes, timeout_ms: Optional[int] = None) -> bytes:
        """Send a request and block for the correlated reply

        Args:
            destination: Where to deliver the request (endpoint or service name)
            payload: Encoded request
            timeout_ms: Reply timeout in milliseconds, None waits forever

        Returns:
            bytes: Encoded reply

        Raises:
            TimeoutError: No reply within timeout_ms
            ConnectionError: Local send/receive failure
            TransportShutdownError: Transport shut down during the call
        """
        pass

    @abc.abstractmethod
    def publish(self, destination: str, payload: bytes) -> None:
        """Send a payload without waiting for a reply

        Raises:
            ConnectionError: Local send failure
            TransportShutdownError: Transport already shut down
        """
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Close the transport and release its resources"""
        pass


class ServerAdapterInterface(abc.ABC):
    """Server side adapter hosting a JSON-RPC service"""

    @abc.abstractmethod
    def start(self, threaded: bool = True):
        """Start serving

        Args:
            threaded: Run in a background thread
        """
        pass

    @abc.abstractmethod
    def stop(self):
        """Stop serving and release resources"""
        pass
