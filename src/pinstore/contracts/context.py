# src/pinstore/contracts/context.py
"""Cancellable execution context passed to every storage operation.

A CallContext carries an optional deadline and a cancellation flag. The RPC
server derives one per inbound call from the gRPC ServicerContext; tests and
scripts use ``CallContext.background()`` or an explicit timeout.

Clients that perform blocking I/O must call ``check()`` before starting and
between chunks of work. Clients without blocking I/O may ignore the context.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from pinstore.contracts.errors import CallCancelledError


class CallContext:
    """Deadline and cancellation carrier for a single storage call.

    Thread-safe: ``cancel()`` may be called from any thread (gRPC invokes
    termination callbacks on its own threads).
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._deadline = None if timeout is None else clock() + timeout
        self._cancelled = threading.Event()
        self._callbacks_lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @classmethod
    def background(cls) -> CallContext:
        """Context with no deadline that is never cancelled unless asked to."""
        return cls()

    def cancel(self) -> None:
        with self._callbacks_lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once when the context is cancelled.

        Runs immediately (on the calling thread) if already cancelled. Callbacks
        must be cheap and must not raise; they run on the cancelling thread.
        """
        with self._callbacks_lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def time_remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.time_remaining()
        return remaining is not None and remaining <= 0.0

    def check(self, operation: str, *, cid: str | None = None) -> None:
        """Raise CallCancelledError if the call should not continue."""
        if self.cancelled:
            raise CallCancelledError(f"{operation} cancelled by caller", operation=operation, cid=cid)
        if self.expired:
            raise CallCancelledError(f"{operation} deadline exceeded", operation=operation, cid=cid)
