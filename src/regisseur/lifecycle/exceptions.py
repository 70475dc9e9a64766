"""
Lifecycle exceptions.

Defines exceptions raised by the engine for misuse of its lifecycle.
Startup failures raised by registered callbacks are never wrapped.
"""


class LifecycleError(Exception):
    """Base exception for lifecycle errors."""

    pass


class EngineStateError(LifecycleError):
    """Raised when an operation is not allowed in the engine's state."""

    def __init__(self, operation: str, state: str):
        """
        Initialize engine state error.

        Args:
            operation: Name of the rejected operation
            state: Engine state at the time of the call
        """
        self.operation = operation
        self.state = state
        super().__init__(
            f"Cannot {operation} while engine is {state}"
        )


class ExitSignalClosedError(LifecycleError):
    """Raised when the exit signal is closed a second time."""

    def __init__(self):
        super().__init__("Exit signal is already closed")
