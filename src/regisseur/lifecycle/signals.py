"""
Termination sources.

A termination source delivers process signals to the engine one at a
time. OSSignalSource listens to the real process; QueueSignalSource is
fed by hand.
"""

import queue
import signal
from typing import Dict, Iterable, Protocol, Tuple


def termination_signals() -> Tuple[signal.Signals, ...]:
    """
    Signals the engine subscribes to.

    SIGHUP and SIGQUIT are skipped on platforms that lack them.
    """
    names = ("SIGHUP", "SIGQUIT", "SIGTERM", "SIGINT")
    return tuple(
        getattr(signal, name) for name in names if hasattr(signal, name)
    )


def stop_signals() -> Tuple[signal.Signals, ...]:
    """Signals that trigger graceful shutdown."""
    names = ("SIGQUIT", "SIGTERM", "SIGINT")
    return tuple(
        getattr(signal, name) for name in names if hasattr(signal, name)
    )


def reload_signals() -> Tuple[signal.Signals, ...]:
    """Signals reserved for configuration reload (currently ignored)."""
    return (signal.SIGHUP,) if hasattr(signal, "SIGHUP") else ()


def signal_name(sig) -> str:
    """Return a printable name for a signal value."""
    try:
        return signal.Signals(sig).name
    except ValueError:
        return str(sig)


class TerminationSource(Protocol):
    """
    Protocol for signal delivery into the engine.

    subscribe() is called once every server started, receive() blocks
    until the next signal, close() releases the subscription.
    """

    def subscribe(self, signals: Iterable[signal.Signals]) -> None:
        ...

    def receive(self) -> signal.Signals:
        ...

    def close(self) -> None:
        ...


class QueueSignalSource:
    """
    In-memory termination source.

    Example:
        source = QueueSignalSource()
        engine = new_engine(with_termination_source(source))
        threading.Timer(1.0, source.send, args=(signal.SIGTERM,)).start()
        engine.run()
    """

    def __init__(self):
        # SimpleQueue.put is reentrant, so a signal handler may call it
        # while the main thread is inside receive()
        self._queue: "queue.SimpleQueue[signal.Signals]" = queue.SimpleQueue()
        self.subscribed: Tuple[signal.Signals, ...] = ()
        self.closed = False

    def subscribe(self, signals: Iterable[signal.Signals]) -> None:
        self.subscribed = tuple(signals)

    def send(self, sig) -> None:
        """Deliver a signal as if the process had received it."""
        self._queue.put(sig)

    def receive(self) -> signal.Signals:
        return self._queue.get()

    def close(self) -> None:
        self.closed = True


class OSSignalSource(QueueSignalSource):
    """
    Termination source backed by OS signal handlers.

    Handlers only enqueue the signal; the engine processes it on its own
    thread. Original handlers are restored on close().

    Must be subscribed from the main thread.
    """

    def __init__(self):
        super().__init__()
        self._original_handlers: Dict[signal.Signals, object] = {}

    def subscribe(self, signals: Iterable[signal.Signals]) -> None:
        super().subscribe(signals)
        for sig in self.subscribed:
            # Raises ValueError off the main thread
            original = signal.signal(sig, self._handle_signal)
            self._original_handlers[sig] = original

    def _handle_signal(self, signum: int, frame) -> None:
        self.send(signal.Signals(signum))

    def close(self) -> None:
        for sig, handler in self._original_handlers.items():
            # None means the handler was not installed from Python
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._original_handlers.clear()
        super().close()
