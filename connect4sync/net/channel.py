"""
channel.py - Bidirectional message channels between two game instances

A channel moves whole text payloads. receive() blocks until a full message
arrives, the optional timeout expires (PeerTimeoutError) or cancel() is
called from another thread (SyncCancelledError).

SocketChannel frames every message on the wire as a 4-byte big-endian
length prefix followed by the UTF-8 payload.
"""

import queue
import socket
import struct
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from connect4sync.debug import debug
from connect4sync.errors import ChannelClosedError, PeerTimeoutError, SnapshotError, SyncCancelledError

# Blocking waits are sliced so cancel() is noticed promptly
POLL_INTERVAL = 0.1
HEADER = struct.Struct('>I')
MAX_MESSAGE_SIZE = 1 << 20


class Channel(ABC):
    """Reliable, ordered, blocking message channel to one peer."""

    def __init__(self):
        self._cancelled = threading.Event()

    @abstractmethod
    def send(self, payload: str) -> None:
        """Send one message. Raises ChannelClosedError on transport failure."""

    @abstractmethod
    def _receive_slice(self, wait: float) -> Optional[str]:
        """Wait up to `wait` seconds for a message; None if nothing arrived yet."""

    def receive(self, timeout: Optional[float] = None) -> str:
        """
        Block until the next message arrives.

        Args:
            timeout: Seconds to wait, None to wait indefinitely

        Returns:
            The message payload

        Raises:
            PeerTimeoutError: if the timeout expired
            SyncCancelledError: if cancel() was called before or during the wait
            ChannelClosedError: if the peer went away
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            if self._cancelled.is_set():
                # The cancel is consumed by the receive it aborts
                self._cancelled.clear()
                raise SyncCancelledError("Receive cancelled")

            wait = POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PeerTimeoutError(timeout)
                wait = min(wait, remaining)

            payload = self._receive_slice(wait)
            if payload is not None:
                debug.trace(f"Received {len(payload)} chars", "channel")
                return payload

    def cancel(self) -> None:
        """Abort the pending receive, or the next one if none is running yet."""
        debug.debug("Cancelling pending receive", "channel")
        self._cancelled.set()

    def close(self) -> None:
        self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class QueueChannel(Channel):
    """One end of an in-process channel pair backed by thread queues."""

    _CLOSED = object()

    def __init__(self, inbox: queue.Queue, outbox: queue.Queue):
        super().__init__()
        self._inbox = inbox
        self._outbox = outbox
        self._closed = False

    @classmethod
    def pair(cls) -> Tuple['QueueChannel', 'QueueChannel']:
        """Create two linked endpoints."""
        a_to_b: queue.Queue = queue.Queue()
        b_to_a: queue.Queue = queue.Queue()
        return cls(b_to_a, a_to_b), cls(a_to_b, b_to_a)

    def send(self, payload: str) -> None:
        if self._closed:
            raise ChannelClosedError("Channel is closed")
        self._outbox.put(payload)

    def _receive_slice(self, wait: float) -> Optional[str]:
        if self._closed:
            raise ChannelClosedError("Channel is closed")
        try:
            item = self._inbox.get(timeout=wait)
        except queue.Empty:
            return None
        if item is self._CLOSED:
            self._closed = True
            raise ChannelClosedError("Peer closed the channel")
        return item

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._outbox.put(self._CLOSED)
        super().close()


class SocketChannel(Channel):
    """Channel over a connected TCP socket."""

    def __init__(self, sock: socket.socket):
        super().__init__()
        self._sock = sock
        self._buffer = b''

    def send(self, payload: str) -> None:
        data = payload.encode('utf-8')
        try:
            self._sock.settimeout(None)
            self._sock.sendall(HEADER.pack(len(data)) + data)
        except OSError as e:
            raise ChannelClosedError(f"Send failed: {e}") from e
        debug.trace(f"Sent {len(data)} bytes", "channel")

    def _receive_slice(self, wait: float) -> Optional[str]:
        # Partial frames stay in the buffer across slices
        if self._frame_ready():
            return self._take_frame()

        self._sock.settimeout(wait)
        try:
            chunk = self._sock.recv(4096)
        except socket.timeout:
            return None
        except OSError as e:
            raise ChannelClosedError(f"Receive failed: {e}") from e

        if not chunk:
            raise ChannelClosedError("Peer closed the connection")
        self._buffer += chunk

        return self._take_frame() if self._frame_ready() else None

    def _frame_ready(self) -> bool:
        if len(self._buffer) < HEADER.size:
            return False
        (length,) = HEADER.unpack_from(self._buffer)
        if length > MAX_MESSAGE_SIZE:
            raise ChannelClosedError(f"Frame of {length} bytes exceeds limit")
        return len(self._buffer) >= HEADER.size + length

    def _take_frame(self) -> str:
        (length,) = HEADER.unpack_from(self._buffer)
        end = HEADER.size + length
        frame, self._buffer = self._buffer[HEADER.size:end], self._buffer[end:]
        try:
            return frame.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SnapshotError(f"Frame of {length} bytes is not valid UTF-8") from e

    def close(self) -> None:
        super().close()
        try:
            self._sock.close()
        except OSError as e:
            debug.warning(f"Error closing socket: {e}", "channel")


def listen(host: str, port: int, accept_timeout: Optional[float] = None) -> SocketChannel:
    """
    Wait for one peer to connect.

    Args:
        host: Interface to bind
        port: TCP port to bind
        accept_timeout: Seconds to wait for the peer, None to wait indefinitely

    Returns:
        Channel to the connected peer
    """
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        server.bind((host, port))
        server.listen(1)
        server.settimeout(accept_timeout)
        debug.info(f"Waiting for peer on {host}:{port}", "channel")
        try:
            conn, address = server.accept()
        except socket.timeout:
            raise PeerTimeoutError(accept_timeout)
    except OSError as e:
        raise ChannelClosedError(f"Cannot listen on {host}:{port}: {e}") from e
    finally:
        server.close()

    debug.info(f"Peer connected from {address[0]}:{address[1]}", "channel")
    return SocketChannel(conn)


def connect(host: str, port: int, timeout: Optional[float] = None) -> SocketChannel:
    """
    Connect to a hosting peer.

    Raises:
        ChannelClosedError: if the connection cannot be made
    """
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise ChannelClosedError(f"Could not connect to {host}:{port}: {e}") from e

    debug.info(f"Connected to peer at {host}:{port}", "channel")
    return SocketChannel(sock)
