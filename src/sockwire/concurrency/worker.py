"""Run blocking connection calls on a worker thread with a deadline.

The connection itself has no cancellation mechanism. These helpers move the
blocking call onto an AnyIO worker thread and, when the deadline passes,
abandon the thread and close the socket from the event loop side so the
blocked call fails promptly.
"""

from functools import partial
from typing import Callable, Optional, TypeVar

import anyio

from sockwire.connection import Connection
from sockwire.errors import TimeoutError
from sockwire.packet import Packet
from sockwire.telemetry import get_telemetry

T = TypeVar("T")

_, _logger = get_telemetry("sockwire.concurrency")


async def _run_with_deadline(
    connection: Connection, func: Callable[[], T], timeout: Optional[float], operation: str
) -> T:
    if timeout is None:
        return await anyio.to_thread.run_sync(func)

    with anyio.move_on_after(timeout):
        return await anyio.to_thread.run_sync(func, abandon_on_cancel=True)

    _logger.error(f"{operation}.timeout", timeout=timeout, host=connection.host)
    connection.close()
    raise TimeoutError(f"{operation} timed out after {timeout} seconds")


async def connect_in_worker(connection: Connection, timeout: Optional[float] = None) -> None:
    """Connect on a worker thread.

    Args:
        connection: The connection to establish.
        timeout: Optional deadline in seconds.

    Raises:
        TimeoutError: If the deadline passes; the connection is closed.
        ConnectionFailedError: If the connect call fails.
        ConnectionTimeoutError: If the connection's own window elapses.
    """
    await _run_with_deadline(connection, connection.connect, timeout, "connect")


async def send_in_worker(
    connection: Connection,
    packet: Packet,
    wait_for_response: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> None:
    """Send a packet on a worker thread.

    Args:
        connection: The connection to send on.
        packet: The packet to send; its encoder receives the response.
        wait_for_response: Passed through to ``Connection.send``.
        timeout: Optional deadline in seconds for the whole exchange.

    Raises:
        TimeoutError: If the deadline passes; the connection is closed.
        TransportError: If the exchange fails.
    """
    await _run_with_deadline(
        connection,
        partial(connection.send, packet, wait_for_response),
        timeout,
        "send",
    )
