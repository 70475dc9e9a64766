"""
Timeout support for blocking lifecycle calls.

Runs a call on a daemon worker thread and gives up waiting after the
timeout. The worker is not interrupted; Python threads cannot be killed.
"""

import threading
from typing import Any, Callable, Optional


class TimeoutError(Exception):
    """Raised when operation exceeds timeout."""

    def __init__(self, operation: str, timeout: float):
        """
        Initialize timeout error.

        Args:
            operation: Name of operation that timed out
            timeout: Timeout duration in seconds
        """
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"Operation '{operation}' exceeded timeout of {timeout} seconds"
        )


class TimeoutCall:
    """
    Runs a callable with an optional time bound.

    Attributes:
        timeout: Seconds to wait, None for no limit
        operation: Operation name for error messages
        timed_out: True after a call exceeded the timeout
    """

    def __init__(self, timeout: Optional[float], operation: str = "operation"):
        """
        Initialize timeout call.

        Args:
            timeout: Timeout in seconds (None disables the worker thread)
            operation: Operation name for error messages
        """
        self.timeout = timeout
        self.operation = operation
        self.timed_out = False

    def __call__(self, func: Callable[..., Any], *args: Any) -> Any:
        """
        Invoke func(*args), raising TimeoutError if it takes too long.

        Exceptions raised by func are re-raised unchanged.
        """
        if self.timeout is None:
            return func(*args)

        outcome: dict = {}

        def target():
            try:
                outcome["result"] = func(*args)
            except BaseException as e:
                outcome["error"] = e

        worker = threading.Thread(
            target=target,
            name=f"timeout-{self.operation}",
            daemon=True,
        )
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            self.timed_out = True
            raise TimeoutError(self.operation, self.timeout)
        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("result")


def call_with_timeout(
    func: Callable[..., Any],
    *args: Any,
    seconds: Optional[float] = None,
    operation: str = "operation",
) -> Any:
    """
    Call func(*args) with an optional timeout.

    Args:
        func: Callable to invoke
        *args: Positional arguments for func
        seconds: Timeout duration in seconds (None = wait forever)
        operation: Operation name for error messages

    Returns:
        Whatever func returns

    Raises:
        TimeoutError: If func exceeds the timeout

    Example:
        >>> call_with_timeout(server.start, seconds=5.0, operation="start")
    """
    return TimeoutCall(seconds, operation)(func, *args)
