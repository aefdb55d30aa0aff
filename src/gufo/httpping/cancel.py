# ---------------------------------------------------------------------
# Gufo HTTP Ping: Cancellation
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""
Run-wide cancellation state and interrupt handling.

Attributes:
    SIGNALS: Signals, handled by the interrupter by default.
"""

# Python modules
import asyncio
import logging
import os
import signal
import threading
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)

SIGNALS = (signal.SIGINT, signal.SIGTERM)

Callback = Callable[[], object]


class CancelToken(object):
    """
    Shared cancellation state.

    Probe loop polls `stopping` before each attempt and
    registers callbacks, aborting the in-flight wait.
    Interrupter sets the state via `cancel()`.

    `stopping` is backed by `threading.Event`, so reads
    and writes are atomic. Callbacks are fired on the thread
    calling `cancel()`, which must be the event loop's thread.
    Use `loop.call_soon_threadsafe(token.cancel)` from others.

    Args:
        cancelled: Create already cancelled token.
    """

    def __init__(self: "CancelToken", cancelled: bool = False) -> None:
        self.__event = threading.Event()
        self.__callbacks: List[Callback] = []
        if cancelled:
            self.__event.set()

    @property
    def stopping(self: "CancelToken") -> bool:
        """Check if the run must be stopped."""
        return self.__event.is_set()

    def cancel(self: "CancelToken") -> None:
        """Request graceful stop and abort pending waits."""
        if self.__event.is_set():
            return
        self.__event.set()
        callbacks, self.__callbacks = self.__callbacks, []
        for cb in callbacks:
            cb()

    def add_callback(self: "CancelToken", cb: Callback) -> None:
        """
        Register cancellation callback.

        Callback is fired immediately if the token is already
        cancelled.

        Args:
            cb: Callable without arguments.
        """
        if self.__event.is_set():
            cb()
        else:
            self.__callbacks.append(cb)

    def remove_callback(self: "CancelToken", cb: Callback) -> None:
        """
        Unregister cancellation callback.

        Args:
            cb: Previously registered callable.
        """
        try:
            self.__callbacks.remove(cb)
        except ValueError:
            pass  # Already fired


def terminate() -> None:
    """Terminate process immediately, bypassing all cleanup."""
    logger.debug("Second interrupt, terminating")
    os._exit(0)


class Interrupter(object):
    """
    Interrupt signal handler.

    * First signal requests graceful stop via the token.
    * Second signal terminates the process immediately.

    Args:
        token: Shared cancellation token.
        terminate: Callable, invoked on the second signal.
    """

    def __init__(
        self: "Interrupter",
        token: CancelToken,
        terminate: Callback = terminate,
    ) -> None:
        self.__token = token
        self.__terminate = terminate

    def on_signal(self: "Interrupter") -> None:
        """Handle interrupt signal."""
        if self.__token.stopping:
            self.__terminate()
            return
        logger.debug("Interrupted, stopping after current attempt")
        self.__token.cancel()

    def install(
        self: "Interrupter",
        loop: asyncio.AbstractEventLoop,
        signals: Iterable[int] = SIGNALS,
    ) -> None:
        """
        Install signal handlers into event loop.

        Args:
            loop: Event loop.
            signals: Signals to handle.
        """
        for sig in signals:
            loop.add_signal_handler(sig, self.on_signal)
