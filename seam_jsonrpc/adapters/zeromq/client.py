"""
ZeroMQ客户端传输适配器

基于DEALER套接字的请求-响应传输。每个目标端点使用一个DEALER套接字，
每个请求附带一个关联帧，用于丢弃超时后迟到的响应。

帧格式: [b"", correlation_id, payload]；通知使用空的correlation_id。
"""

import zmq
import uuid
import time
import logging
import threading
from typing import Dict, Optional

from seam_jsonrpc.adapters.adapter_interface import TransportInterface, TransportShutdownError

logger = logging.getLogger(__name__)

# 等待响应时单次轮询的最长时间(毫秒)
POLL_SLICE_MS = 100

class ZeroMQTransport(TransportInterface):
    """
    ZeroMQ传输适配器，实现send/publish语义
    套接字访问由锁串行化，因此实例可以在线程间共享
    """

    def __init__(self, linger_ms: int = 0):
        """初始化ZeroMQ传输

        Args:
            linger_ms: 关闭时等待未发送消息的时间(毫秒)
        """
        self.linger_ms = linger_ms
        self.context = zmq.Context()
        self._sockets: Dict[str, zmq.Socket] = {}
        self._lock = threading.RLock()
        self._closed = False
        self._terminated = False

    def __del__(self):
        """析构函数，关闭套接字和上下文"""
        self.close()

    def _socket_for(self, destination: str) -> zmq.Socket:
        socket = self._sockets.get(destination)
        if socket is None:
            socket = self.context.socket(zmq.DEALER)
            socket.setsockopt(zmq.LINGER, self.linger_ms)
            socket.connect(destination)
            self._sockets[destination] = socket
            logger.info(f"ZeroMQ传输连接到 {destination}")
        return socket

    def send(self, destination: str, payload: bytes, timeout_ms: Optional[int] = None) -> bytes:
        """发送请求并等待关联的响应

        等待按POLL_SLICE_MS分段进行，close()可在等待期间中断请求。

        Args:
            destination: ZeroMQ端点地址，如 "tcp://localhost:5555"
            payload: 编码后的请求
            timeout_ms: 超时时间(毫秒)，None表示无限等待

        Returns:
            bytes: 编码后的响应

        Raises:
            TimeoutError: 请求超时
            ConnectionError: ZeroMQ错误
            TransportShutdownError: 传输已关闭或在等待期间被关闭
        """
        correlation_id = uuid.uuid4().hex.encode('ascii')
        deadline = None if timeout_ms is None else time.monotonic() + timeout_ms / 1000.0

        with self._lock:
            if self._closed:
                raise TransportShutdownError("ZeroMQ传输已关闭")
            try:
                socket = self._socket_for(destination)
                socket.send_multipart([b"", correlation_id, payload])

                while True:
                    if self._closed:
                        raise TransportShutdownError("ZeroMQ传输在等待响应时被关闭")

                    wait_ms = POLL_SLICE_MS
                    if deadline is not None:
                        wait_ms = min(wait_ms, max(0, int((deadline - time.monotonic()) * 1000)))

                    if not socket.poll(timeout=wait_ms, flags=zmq.POLLIN):
                        if deadline is not None and time.monotonic() >= deadline:
                            raise TimeoutError(f"ZeroMQ请求超时 ({timeout_ms}ms)")
                        continue

                    frames = socket.recv_multipart()
                    if len(frames) == 3 and frames[1] == correlation_id:
                        return frames[2]
                    # 超时请求的迟到响应
                    logger.debug(f"丢弃不匹配的响应: {frames[1:2]}")

            except zmq.error.ContextTerminated as e:
                raise TransportShutdownError(f"ZeroMQ上下文已终止: {e}") from e
            except zmq.error.ZMQError as e:
                raise ConnectionError(f"ZeroMQ连接错误: {e}") from e

    def publish(self, destination: str, payload: bytes) -> None:
        """发送通知，不等待响应

        Raises:
            ConnectionError: ZeroMQ错误或发送队列已满
            TransportShutdownError: 传输已关闭
        """
        with self._lock:
            if self._closed:
                raise TransportShutdownError("ZeroMQ传输已关闭")
            try:
                socket = self._socket_for(destination)
                socket.send_multipart([b"", b"", payload], flags=zmq.NOBLOCK)
            except zmq.error.Again as e:
                raise ConnectionError(f"无法发送通知到 {destination}: 发送队列已满") from e
            except zmq.error.ContextTerminated as e:
                raise TransportShutdownError(f"ZeroMQ上下文已终止: {e}") from e
            except zmq.error.ZMQError as e:
                raise ConnectionError(f"ZeroMQ连接错误: {e}") from e

    def close(self):
        """关闭所有套接字和上下文

        先标记为已关闭，使正在等待的send()在一个轮询分段内退出，
        再在锁内释放套接字。
        """
        lock = getattr(self, '_lock', None)
        if lock is None:
            return
        self._closed = True
        with lock:
            if self._terminated:
                return
            self._terminated = True
            for socket in self._sockets.values():
                socket.close()
            self._sockets.clear()
            self.context.term()
