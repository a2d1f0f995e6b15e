"""
TCP connection with a bounded connect window and request/response exchange.

The connect loop drives a non-blocking socket: ``connect_ex`` is called
repeatedly while it reports the connection as in progress and the connect
window has not elapsed. Once connected the socket is switched back to blocking
mode with an I/O timeout equal to the connect window.
"""

import contextlib
import errno
import socket
import threading
import time
from enum import Enum
from types import TracebackType
from typing import Any, Dict, Optional, Tuple, Type

from sockwire.config import merge_configs, resolve_config
from sockwire.errors import (
    ConnectionFailedError,
    ConnectionTimeoutError,
    ReceiveError,
    TransportError,
)
from sockwire.packet import Packet
from sockwire.telemetry import get_telemetry

DEFAULT_TIMEOUT_MS = 100.0
DEFAULT_MAX_RESPONSE_BYTES = 2048
DEFAULT_POLL_INTERVAL = 0.001


def _errno_codes(*names: str) -> frozenset:
    return frozenset(getattr(errno, name) for name in names if hasattr(errno, name))


# Windows reports a repeated connect on a pending socket as WSAEINVAL
IN_PROGRESS_CODES = _errno_codes(
    "EINPROGRESS", "EALREADY", "EWOULDBLOCK", "WSAEWOULDBLOCK", "WSAEALREADY", "WSAEINVAL"
)
CONNECTED_CODES = frozenset({0}) | _errno_codes("EISCONN", "WSAEISCONN")


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def timeval_from_ms(timeout_ms: float) -> Tuple[int, int]:
    """Split a millisecond timeout into whole seconds and microseconds."""
    seconds, remainder_ms = divmod(timeout_ms, 1000)
    return int(seconds), int(remainder_ms * 1000)


class Connection:
    """A single TCP socket used for synchronous packet exchanges."""

    def __init__(
        self,
        host: str,
        port: int,
        timeout_ms: Optional[float] = None,
        connect: bool = True,
        max_response_bytes: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None,
        enable_telemetry: bool = True,
    ):
        """Initialize the connection.

        Args:
            host: Host name or IP address of the server.
            port: Server port.
            timeout_ms: Connect window in milliseconds, also used as the
                socket's read/write timeout once connected.
            connect: Whether to connect before returning.
            max_response_bytes: Upper bound for a single receive.
            config: Configuration options; ``timeout_ms``,
                ``max_response_bytes`` and ``poll_interval`` are read from
                here, then from ``SOCKWIRE_*`` environment variables.
            enable_telemetry: Whether to log and trace connection events.

        Raises:
            ConfigurationError: If a configured value is invalid.
            ConnectionFailedError: If auto-connect fails.
            ConnectionTimeoutError: If auto-connect times out.
        """
        overrides = {
            key: value
            for key, value in (
                ("timeout_ms", timeout_ms),
                ("max_response_bytes", max_response_bytes),
            )
            if value is not None
        }
        # Explicit arguments win over the config dict
        self._config = merge_configs(config, overrides)
        self.host = host
        self.port = port
        self.timeout_ms = resolve_config(
            self._config, "timeout_ms", DEFAULT_TIMEOUT_MS, float
        )
        self.max_response_bytes = resolve_config(
            self._config, "max_response_bytes", DEFAULT_MAX_RESPONSE_BYTES, int
        )
        self.poll_interval = resolve_config(
            self._config, "poll_interval", DEFAULT_POLL_INTERVAL, float
        )

        self.response: Optional[bytes] = None
        self._socket: Optional[socket.socket] = None
        # Socket of an in-flight connect(), so close() can abort it
        self._pending: Optional[socket.socket] = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = threading.Lock()

        self._tracer, self._logger = (
            get_telemetry("sockwire.connection") if enable_telemetry else (None, None)
        )

        if connect:
            self.connect()

    def __repr__(self) -> str:
        return f"Connection({self.host!r}, {self.port}, state={self._state.value})"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._socket is not None and self._state is ConnectionState.CONNECTED

    def _span(self, name: str, **attributes: Any):
        if self._tracer:
            return self._tracer.start_as_current_span(name, attributes)
        return contextlib.nullcontext()

    def _create_socket(self, family: int) -> socket.socket:
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setblocking(False)
        return sock

    def _resolve(self) -> Tuple[int, Any]:
        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise ConnectionFailedError(
                f"Connection to {self.host}:{self.port} failed: {e}", code=e.errno
            ) from e
        family, _, _, _, address = infos[0]
        return family, address

    def connect(self) -> None:
        """Establish the connection within the connect window.

        Any previously held socket is closed first. A ``close()`` from another
        thread while connecting aborts the attempt.

        Raises:
            ConnectionFailedError: If the connect call reports an error or the
                attempt was aborted by ``close()``.
            ConnectionTimeoutError: If the window elapses first.
        """
        self.close()

        with self._span("sockwire.connect", host=self.host, port=self.port):
            family, address = self._resolve()
            sock = self._create_socket(family)
            with self._lock:
                self._pending = sock
                self._state = ConnectionState.CONNECTING

            try:
                code, elapsed_ms = self._poll_connect(sock, address)
                if code in CONNECTED_CODES:
                    code = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
                if code == 0:
                    sock.setblocking(True)
                    seconds, microseconds = timeval_from_ms(self.timeout_ms)
                    io_timeout = seconds + microseconds / 1_000_000
                    sock.settimeout(io_timeout if io_timeout > 0 else None)
            except BaseException as e:
                if not self._release_pending(sock) and isinstance(e, OSError):
                    raise self._aborted() from e
                raise

            if code != 0:
                if not self._release_pending(sock):
                    raise self._aborted()
                if code in IN_PROGRESS_CODES:
                    elapsed_ms = round(elapsed_ms, 4)
                    if self._logger:
                        self._logger.error(
                            "connection.timeout",
                            host=self.host,
                            port=self.port,
                            elapsed_ms=elapsed_ms,
                        )
                    raise ConnectionTimeoutError(
                        f"Connection to {self.host}:{self.port} timed out ({elapsed_ms})",
                        elapsed_ms=elapsed_ms,
                    )
                if self._logger:
                    self._logger.error(
                        "connection.connect_failed",
                        host=self.host,
                        port=self.port,
                        code=code,
                        error=errno.errorcode.get(code, str(code)),
                    )
                raise ConnectionFailedError(
                    f"Connection to {self.host}:{self.port} failed: {code}", code=code
                )

            with self._lock:
                published = self._pending is sock
                if published:
                    self._pending = None
                    self._socket = sock
                    self._state = ConnectionState.CONNECTED
            if not published:
                raise self._aborted()

            if self._logger:
                self._logger.info(
                    "connection.connected",
                    host=self.host,
                    port=self.port,
                    elapsed_ms=round(elapsed_ms, 4),
                )

    def _poll_connect(self, sock: socket.socket, address: Any) -> Tuple[int, float]:
        start = time.monotonic()
        while True:
            if self._pending is not sock:
                return errno.ECONNABORTED, (time.monotonic() - start) * 1000
            code = sock.connect_ex(address)
            elapsed_ms = (time.monotonic() - start) * 1000
            if code not in IN_PROGRESS_CODES or elapsed_ms >= self.timeout_ms:
                return code, elapsed_ms
            remaining = (self.timeout_ms - elapsed_ms) / 1000
            time.sleep(min(self.poll_interval, remaining))

    def _release_pending(self, sock: socket.socket) -> bool:
        """Drop a socket that never connected.

        Returns False when close() had already taken it over.
        """
        with self._lock:
            owned = self._pending is sock
            if owned:
                self._pending = None
                self._state = ConnectionState.DISCONNECTED
        sock.close()
        return owned

    def _aborted(self) -> ConnectionFailedError:
        if self._logger:
            self._logger.warning("connection.connect_aborted", host=self.host, port=self.port)
        return ConnectionFailedError(
            f"Connection to {self.host}:{self.port} was closed while connecting",
            code=errno.ECONNABORTED,
        )

    def close(self) -> None:
        """Close the socket. Safe to call when already disconnected.

        Also aborts a connect() running on another thread.
        """
        with self._lock:
            pending, self._pending = self._pending, None
            sock, self._socket = self._socket, None
            self._state = ConnectionState.DISCONNECTED
        if pending is not None:
            pending.close()
            if self._logger:
                self._logger.info("connection.connect_cancelled", host=self.host, port=self.port)
        if sock is None:
            return
        try:
            # Wakes up a recv blocked on another thread
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            if self._logger:
                self._logger.debug("connection.shutdown_skipped", error=str(e))
        try:
            sock.close()
        except OSError as e:
            if self._logger:
                self._logger.warning("connection.close_error", error=str(e))
        if self._logger:
            self._logger.info("connection.closed", host=self.host, port=self.port)

    def _transmit(self, data: bytes) -> None:
        try:
            self._socket.sendall(data)
        except OSError as e:
            if self._logger:
                self._logger.error(
                    "connection.send_failed", error=str(e), error_type=type(e).__name__
                )
            self.close()
            raise TransportError(f"Couldn't send packet: {e}") from e

    def _receive(self) -> bytes:
        sock = self._socket
        try:
            data = sock.recv(self.max_response_bytes)
        except socket.timeout as e:
            raise ReceiveError("Couldn't read response: timed out", code=errno.ETIMEDOUT) from e
        except OSError as e:
            raise ReceiveError(f"Couldn't read response: {e}", code=e.errno) from e

        if not data:
            code = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
            if self._logger:
                self._logger.error("connection.empty_response", code=code)
            raise ReceiveError(f"Couldn't read response: {code}", code=code)
        return data

    def send(self, packet: Packet, wait_for_response: Optional[bool] = None) -> None:
        """Send a packet and feed the response back into its encoder.

        Does nothing when the connection is closed or the packet renders to
        no bytes. After a response has been handled the connection is
        re-established if it was closed in the meantime.

        Args:
            packet: The packet to send.
            wait_for_response: Whether to block for a response. Defaults to
                the packet's ``wait_for_response`` attribute.

        Raises:
            TransportError: If the packet could not be sent.
            ReceiveError: If no response could be read.
        """
        if not self.is_connected:
            return

        data = packet.encoder.get_output_bytes()
        if not data:
            return

        if wait_for_response is None:
            wait_for_response = packet.wait_for_response

        with self._span("sockwire.send", size=len(data), wait=wait_for_response):
            self._transmit(data)
            if self._logger:
                self._logger.debug("packet.sent", size=len(data))

            if not wait_for_response:
                return

            response = self._receive()
            if self._logger:
                self._logger.debug("packet.response", size=len(response))

            packet.encoder.set_input_buffer(response)
            packet.encoder.read()
            packet.on_response()

        if not self.is_connected:
            self.connect()

    def send_bytes(self, data: bytes, wait_for_response: bool = True) -> Optional[bytes]:
        """Send raw bytes and return the response.

        The response is also kept in ``self.response``.

        Returns:
            The response bytes, or None if nothing was sent or awaited.

        Raises:
            TransportError: If the data could not be sent.
            ReceiveError: If no response could be read.
        """
        self.response = None
        if not self.is_connected or not data:
            return None

        with self._span("sockwire.send", size=len(data), wait=wait_for_response):
            self._transmit(bytes(data))
            if not wait_for_response:
                return None
            self.response = self._receive()

        if not self.is_connected:
            self.connect()
        return self.response

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()
