"""TCP server that splits incoming streams into newline-delimited messages."""

from __future__ import annotations

import collections
import logging
import select
import socket
import threading
from typing import Callable, Deque, List, Optional

BUFFER_SIZE = 1024
MAX_CONCURRENT_CONNECTIONS = 5
ACK = b"OK\n"

MessageCallback = Callable[[bytes], object]

log = logging.getLogger(__name__)


class Server:
    """Accepts TCP clients and queues every newline-terminated message they send.

    Each complete message is acknowledged with ``OK\\n``, handed to the callback
    and appended to an internal queue that can be drained with
    :meth:`pop_message` or :meth:`pop_message_blocking`.
    """

    def __init__(self, port: int, callback: Optional[MessageCallback]) -> None:
        self.port = port
        self.ready = threading.Event()
        self._callback = callback
        self._stopping = False
        self._queue: Deque[bytes] = collections.deque()
        self._queue_cond = threading.Condition()
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._wake_r, self._wake_w = socket.socketpair()
        self._listener_done = threading.Event()
        self._listener_done.set()
        self._listener_ident: Optional[int] = None

    @property
    def stopped(self) -> bool:
        """Whether :meth:`stop` has been called."""
        return self._stopping

    def start(self) -> None:
        """Listen for connections until :meth:`stop` is called (blocks)."""
        with self._lock:
            if self._stopping:
                return
            if not self._listener_done.is_set():
                raise RuntimeError("server is already running")
            self._listener_done.clear()
            self._listener_ident = threading.get_ident()
        try:
            self._serve()
        finally:
            self._listener_ident = None
            self._listener_done.set()

    def _serve(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(("", self.port))
            listener.listen(MAX_CONCURRENT_CONNECTIONS)
            self.port = listener.getsockname()[1]
            log.info("waiting for connections on port %d", self.port)
            self.ready.set()

            while not self._stopping:
                readable, _, _ = select.select([listener, self._wake_r], [], [])
                if self._wake_r in readable:
                    log.info("listener received stop command")
                    break
                conn, address = listener.accept()
                log.info("connection accepted from %s:%d", *address[:2])
                worker = threading.Thread(
                    target=self._handle_connection, args=(conn,), daemon=True
                )
                with self._lock:
                    if self._stopping:
                        conn.close()
                        break
                    self._threads.append(worker)
                worker.start()

    def _handle_connection(self, conn: socket.socket) -> None:
        pending = bytearray()
        with conn:
            while not self._stopping:
                readable, _, _ = select.select([conn, self._wake_r], [], [])
                if self._wake_r in readable:
                    log.info("connection handler received stop command")
                    break
                if len(pending) >= BUFFER_SIZE:
                    break
                try:
                    chunk = conn.recv(BUFFER_SIZE - len(pending))
                except OSError:
                    break
                if not chunk:
                    break
                pending += chunk
                *lines, rest = pending.split(b"\n")
                for line in lines:
                    try:
                        conn.sendall(ACK)
                    except OSError:
                        log.warning("client write failed")
                        return
                    self._deliver(bytes(line))
                pending = bytearray(rest)
        log.info("connection closed")

    def _deliver(self, message: bytes) -> None:
        if self._callback is not None:
            self._callback(message)
        with self._queue_cond:
            self._queue.append(message)
            self._queue_cond.notify()

    def stop(self) -> None:
        """Stop listening, close all connections and wake blocked consumers."""
        with self._lock:
            already_stopped = self._stopping
            self._stopping = True
        if not already_stopped:
            self._wake_w.send(b"0")
            if self._listener_ident != threading.get_ident():
                self._listener_done.wait()
            current = threading.current_thread()
            for worker in self._threads:
                if worker is not current and worker.is_alive():
                    worker.join()
            self._threads.clear()
            self._wake_r.close()
            self._wake_w.close()
        with self._queue_cond:
            self._queue_cond.notify_all()

    def pop_message(self) -> Optional[bytes]:
        """Return the oldest queued message, or None if none is queued or stopped."""
        with self._queue_cond:
            if self._stopping or not self._queue:
                return None
            return self._queue.popleft()

    def pop_message_blocking(self) -> Optional[bytes]:
        """Wait for a message and return it; return None once the server stops."""
        with self._queue_cond:
            self._queue_cond.wait_for(lambda: bool(self._queue) or self._stopping)
            if self._stopping:
                return None
            return self._queue.popleft()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()