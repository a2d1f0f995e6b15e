"""
Pytest configuration for sockwire tests.

This module contains fixtures and configuration for pytest.
"""

import socket
import threading
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

from sockwire.packet import Packet

Handler = Callable[[bytes], Optional[bytes]]


class LoopbackServer:
    """Threaded TCP server answering each received chunk through a handler.

    The handler returns the reply bytes, ``b""`` to stay silent, or None to
    close the client connection without replying.
    """

    def __init__(self, handler: Handler):
        self.handler = handler
        self.received: List[bytes] = []
        self.accepted = 0
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(5)
        self._sock.settimeout(0.1)
        self.host, self.port = self._sock.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "LoopbackServer":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        self._thread.join(timeout=1.0)
        self._sock.close()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            self.accepted += 1
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        conn.settimeout(0.1)
        with conn:
            while not self._stop.is_set():
                try:
                    data = conn.recv(4096)
                except socket.timeout:
                    continue
                except OSError:
                    return
                if not data:
                    return
                self.received.append(data)
                reply = self.handler(data)
                if reply is None:
                    return
                if reply:
                    conn.sendall(reply)


@pytest.fixture
def loopback_server():
    """Fixture returning a factory that starts loopback servers."""
    servers = []

    def start(handler: Handler = lambda data: data) -> LoopbackServer:
        server = LoopbackServer(handler).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()


@pytest.fixture
def refused_port():
    """Fixture providing a loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


class RecordingPacket(Packet):
    """Packet that counts response hook invocations."""

    def on_instance(self, *args):
        self.instance_args = args
        self.responses = 0

    def on_response(self):
        self.responses += 1


@pytest.fixture
def recording_packet_class():
    return RecordingPacket


# Mock Telemetry
@pytest.fixture
def mock_telemetry(monkeypatch):
    """Fixture providing mock telemetry components for the connection module."""
    mock_tracer = MagicMock()
    mock_span = MagicMock()
    mock_span.__enter__.return_value = mock_span
    mock_tracer.start_as_current_span.return_value = mock_span

    mock_logger = MagicMock()

    mock_get_telemetry = MagicMock(return_value=(mock_tracer, mock_logger))
    monkeypatch.setattr("sockwire.connection.get_telemetry", mock_get_telemetry)

    return mock_tracer, mock_logger


# Anyio Backend Selection - only use asyncio
@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Fixture to run tests with different anyio backends."""
    return request.param
