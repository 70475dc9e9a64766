"""
Service lifecycle management.

Sequences startup phases, waits for a termination signal and drives an
ordered graceful shutdown.
"""

from regisseur.lifecycle.engine import (
    Engine,
    EngineState,
    Option,
    new_engine,
    with_cancel_funcs,
    with_defer_funcs,
    with_grace_period,
    with_load_funcs,
    with_logger,
    with_server_factories,
    with_servers,
    with_settings,
    with_termination_source,
)
from regisseur.lifecycle.exceptions import (
    EngineStateError,
    ExitSignalClosedError,
    LifecycleError,
)
from regisseur.lifecycle.exit_signal import ExitLatch, ExitSignal
from regisseur.lifecycle.server import (
    CancelFunc,
    DeferFunc,
    LoadFunc,
    Server,
    ServerFactory,
)
from regisseur.lifecycle.signals import (
    OSSignalSource,
    QueueSignalSource,
    TerminationSource,
)

__all__ = [
    # Engine
    "Engine",
    "EngineState",
    "Option",
    "new_engine",
    "with_cancel_funcs",
    "with_defer_funcs",
    "with_grace_period",
    "with_load_funcs",
    "with_logger",
    "with_server_factories",
    "with_servers",
    "with_settings",
    "with_termination_source",
    # Exit signal
    "ExitLatch",
    "ExitSignal",
    # Contracts
    "CancelFunc",
    "DeferFunc",
    "LoadFunc",
    "Server",
    "ServerFactory",
    # Signals
    "OSSignalSource",
    "QueueSignalSource",
    "TerminationSource",
    # Exceptions
    "EngineStateError",
    "ExitSignalClosedError",
    "LifecycleError",
]
