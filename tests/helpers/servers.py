"""
Server doubles that record lifecycle calls into a shared list.
"""

import threading
from typing import List, Optional


class RecordingServer:
    """Server that appends "<name>.start" / "<name>.stop" to calls."""

    def __init__(
        self,
        name: str,
        calls: List[str],
        start_error: Optional[Exception] = None,
        stop_error: Optional[Exception] = None,
    ):
        self.name = name
        self.calls = calls
        self.start_error = start_error
        self.stop_error = stop_error
        self.running = False

    def start(self) -> None:
        self.calls.append(f"{self.name}.start")
        if self.start_error:
            raise self.start_error
        self.running = True

    def graceful_stop(self) -> None:
        self.calls.append(f"{self.name}.stop")
        self.running = False
        if self.stop_error:
            raise self.stop_error


class BlockingServer(RecordingServer):
    """Server whose start or graceful_stop blocks until released."""

    def __init__(
        self,
        name: str,
        calls: List[str],
        block_start: bool = False,
        block_stop: bool = False,
    ):
        super().__init__(name, calls)
        self.release = threading.Event()
        self.block_start = block_start
        self.block_stop = block_stop

    def start(self) -> None:
        super().start()
        if self.block_start:
            self.release.wait()

    def graceful_stop(self) -> None:
        super().graceful_stop()
        if self.block_stop:
            self.release.wait()
