"""
Single-fire broadcast signal.

ExitSignal is what background workers observe to learn that the process
is shutting down. ExitLatch is the engine-owned side that closes it.
"""

import threading
from typing import Callable, List, Optional

from regisseur.lifecycle.exceptions import ExitSignalClosedError
from regisseur.reporter import SystemReporter


class ExitSignal:
    """
    Read-only view of the exit signal.

    Closed exactly once. Any number of threads may wait on it or attach
    listeners, before or after it closes.

    Example:
        def start_watcher(exit_signal: ExitSignal) -> None:
            def watch():
                while not exit_signal.wait(timeout=1.0):
                    poll()
            threading.Thread(target=watch, daemon=True).start()
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        """
        Initialize an open exit signal.

        Args:
            reporter: Reporter used to log failing listeners
        """
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._listeners: List[Callable[[], None]] = []
        self._reporter = reporter

    def is_closed(self) -> bool:
        """Return True once the signal has fired."""
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the signal fires.

        Args:
            timeout: Maximum seconds to wait (None waits forever)

        Returns:
            True if the signal fired, False on timeout
        """
        return self._event.wait(timeout)

    def add_listener(self, callback: Callable[[], None]) -> None:
        """
        Run callback when the signal fires.

        Listeners attached before the signal fires run synchronously
        inside close(), on the closing thread, before the engine's grace
        pause begins. A listener that blocks delays the rest of shutdown;
        long cleanup belongs in a worker thread that calls wait().
        Listeners attached after the signal fired run immediately on the
        calling thread.

        Args:
            callback: No-argument function
        """
        with self._lock:
            if not self._event.is_set():
                self._listeners.append(callback)
                return
        self._notify(callback)

    def _notify(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            if self._reporter:
                self._reporter.error(
                    f"Exit listener {getattr(callback, '__name__', callback)} "
                    f"failed: {e}",
                    context="ExitSignal",
                )

    def __repr__(self) -> str:
        state = "closed" if self.is_closed() else "open"
        return f"<{self.__class__.__name__} {state}>"


class ExitLatch(ExitSignal):
    """
    Closing side of the exit signal.

    Only the engine holds a latch. Callers that need to observe shutdown
    receive the ExitSignal view returned by ``signal``.
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        super().__init__(reporter)
        self._view = _ExitSignalView(self)

    @property
    def signal(self) -> ExitSignal:
        """Observer view without close()."""
        return self._view

    def attach_reporter(self, reporter: SystemReporter) -> None:
        """Log failing listeners through reporter."""
        self._reporter = reporter

    def close(self) -> None:
        """
        Fire the signal and run pending listeners.

        Raises:
            ExitSignalClosedError: If the signal already fired
        """
        with self._lock:
            if self._event.is_set():
                raise ExitSignalClosedError()
            self._event.set()
            listeners, self._listeners = self._listeners, []

        for callback in listeners:
            self._notify(callback)


class _ExitSignalView(ExitSignal):
    """Delegates every observer call to the owning latch."""

    def __init__(self, latch: ExitLatch):
        self._latch = latch

    def is_closed(self) -> bool:
        return self._latch.is_closed()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._latch.wait(timeout)

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._latch.add_listener(callback)
