"""Async helpers for running the blocking connection on worker threads.

This module uses AnyIO, so the helpers work under both asyncio and trio.
"""

from sockwire.concurrency.worker import connect_in_worker, send_in_worker

__all__ = [
    "connect_in_worker",
    "send_in_worker",
]
