"""
Server protocol and callback types.

Each long-running component implements Server to be started and stopped
by the engine.
"""

from typing import Any, Callable, Protocol, runtime_checkable

from regisseur.lifecycle.exit_signal import ExitSignal


@runtime_checkable
class Server(Protocol):
    """
    Protocol for components started and stopped by the engine.

    Example:
        class HTTPServer:
            def start(self) -> None:
                self._thread = threading.Thread(target=self._serve)
                self._thread.start()

            def graceful_stop(self) -> None:
                self._httpd.shutdown()
                self._thread.join()
    """

    def start(self) -> None:
        """
        Start serving. Raise to abort startup.
        """
        ...

    def graceful_stop(self) -> None:
        """
        Stop serving. Should not block forever.
        """
        ...


LoadFunc = Callable[[], Any]
DeferFunc = Callable[[ExitSignal], Any]
CancelFunc = Callable[[], Any]
ServerFactory = Callable[[], Server]
