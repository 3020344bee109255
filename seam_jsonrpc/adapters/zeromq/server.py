"""
ZeroMQ服务器适配器

基于ROUTER套接字托管JsonRpcService。带关联帧的请求会收到响应，
关联帧为空的请求视为通知，不发送响应。
"""

import zmq
import logging
import threading
import time

from seam_jsonrpc.adapters.adapter_interface import ServerAdapterInterface
from seam_jsonrpc.rpc.service import JsonRpcService
from seam_jsonrpc.telemetry.metrics import record_latency, increment_counter

logger = logging.getLogger(__name__)

class ZeroMQServer(ServerAdapterInterface):
    """
    ZeroMQ服务器适配器，在ROUTER套接字上提供JSON-RPC服务
    """

    def __init__(self,
                 service: JsonRpcService,
                 bind_address: str = "tcp://*:5555"):
        """初始化ZeroMQ服务器

        Args:
            service: 要托管的JSON-RPC服务
            bind_address: ROUTER套接字绑定地址
        """
        self.service = service
        self.bind_address = bind_address
        self.running = False
        self.server_thread = None
        self._serving = False
        self._close_lock = threading.Lock()
        self.context = zmq.Context()

        self.socket = self.context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.bind(bind_address)

        increment_counter("jsonrpc.server.started", 1)

        logger.info(f"ZeroMQ服务器绑定到 {bind_address}, 服务: {service.name}")

    def __del__(self):
        """析构函数，清理资源"""
        self.stop()

    def register_method(self, name, handler, **kwargs):
        """注册RPC方法处理函数（委托给JsonRpcService）"""
        return self.service.register_method(name, handler, **kwargs)

    def start(self, threaded: bool = True):
        """启动服务器

        Args:
            threaded: 是否在单独线程中运行
        """
        self.running = True

        if threaded:
            self.server_thread = threading.Thread(target=self._run_server)
            self.server_thread.daemon = True
            self.server_thread.start()
            logger.info("ZeroMQ服务器在后台线程中启动")
        else:
            logger.info("ZeroMQ服务器在主线程中启动")
            self._run_server()

    def stop(self):
        """停止服务器

        若服务线程仍在处理请求，套接字由该线程退出循环时关闭，
        以免在其使用期间被关闭。
        """
        self.running = False
        thread = getattr(self, 'server_thread', None)
        if thread is not None:
            thread.join(timeout=1.0)
            if thread.is_alive():
                logger.warning("ZeroMQ服务器线程仍在处理请求，退出后将关闭套接字")
                return
            self.server_thread = None
            logger.info("ZeroMQ服务器已停止")
        if getattr(self, '_serving', False):
            # 主线程模式下由_run_server自行关闭
            return
        self._close_socket()

    def _close_socket(self):
        with self._close_lock:
            socket = getattr(self, 'socket', None)
            if socket is not None:
                socket.close()
                self.socket = None
            context = getattr(self, 'context', None)
            if context is not None:
                context.term()
                self.context = None

    def _run_server(self):
        """服务器主循环，退出时关闭套接字"""
        logger.info("ZeroMQ服务器开始接收请求")
        self._serving = True
        try:
            self._serve_loop()
        finally:
            self._serving = False
            self._close_socket()

    def _serve_loop(self):
        """接收并处理请求，直到running被清除"""
        while self.running:
            try:
                frames = self.socket.recv_multipart(flags=zmq.NOBLOCK)
            except zmq.error.Again:
                # 没有消息，继续循环
                time.sleep(0.001)  # 避免CPU满载
                continue
            except zmq.error.ZMQError as e:
                logger.error(f"服务器循环中发生错误: {e}")
                increment_counter("jsonrpc.server.errors", 1, {"type": "loop_error"})
                break

            if len(frames) != 4 or frames[1] != b"":
                logger.error(f"丢弃格式错误的消息，帧数: {len(frames)}")
                increment_counter("jsonrpc.server.errors", 1, {"type": "bad_frames"})
                continue

            identity, _, correlation_id, payload = frames
            start_time = time.time()
            increment_counter("jsonrpc.server.requests.received", 1)

            try:
                reply = self.service.handle_message(payload)
            except Exception as e:
                logger.error(f"处理请求时发生错误: {e}")
                increment_counter("jsonrpc.server.errors", 1, {"type": "internal_error"})
                continue

            # 仅对带关联帧的请求发送响应
            if reply is not None and correlation_id:
                self.socket.send_multipart([identity, b"", correlation_id, reply])
                latency_ms = (time.time() - start_time) * 1000
                record_latency("jsonrpc.server.request.latency", latency_ms)
                logger.debug(f"已发送响应, 耗时: {latency_ms:.2f}ms")
