"""
Lifecycle engine.

Runs load functions, defer functions and server starts in order, waits
for a termination signal, then stops servers, runs cancel functions,
closes the exit signal and pauses for a grace period.
"""

import time
from enum import Enum
from typing import Callable, List, Optional

from regisseur.config import Settings, get_settings
from regisseur.lifecycle.exceptions import EngineStateError
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
    TerminationSource,
    reload_signals,
    signal_name,
    stop_signals,
    termination_signals,
)
from regisseur.reporter import SystemReporter, create_reporter
from regisseur.resilience import TimeoutError, call_with_timeout


class EngineState(Enum):
    """Engine lifecycle state."""

    CONFIGURED = "configured"
    LOADING = "loading"
    DEFERRING = "deferring"
    STARTING = "starting"
    WAITING = "waiting"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


def _name(fn) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


class Engine:
    """
    Process lifecycle engine.

    Startup phases run on the calling thread and abort on the first
    exception, which propagates unchanged. Servers that already started
    are left running. Shutdown is best-effort: failures are logged and
    the sequence continues.

    Attributes:
        settings: Engine configuration
        reporter: Logger for diagnostic traces
        grace_period: Seconds to pause after the exit signal closes
        state: Current lifecycle state

    Example:
        engine = new_engine(
            with_load_funcs(load_config, connect_db),
            with_defer_funcs(start_watcher),
            with_servers(api_server, metrics_server),
            with_cancel_funcs(db.close),
        )
        engine.run()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reporter: Optional[SystemReporter] = None,
        termination_source: Optional[TerminationSource] = None,
    ):
        """
        Initialize an engine with empty registrations.

        Settings and the default reporter are resolved on first use, so
        options applied after construction decide both.

        Args:
            settings: Configuration (defaults to get_settings())
            reporter: Logger (defaults to one built from settings)
            termination_source: Signal source (defaults to OS signals)
        """
        self._settings = settings
        self._reporter = reporter
        self._reporter_injected = reporter is not None
        self._grace_period: Optional[float] = None
        self.termination_source = termination_source or OSSignalSource()
        self.state = EngineState.CONFIGURED

        self._load_funcs: List[LoadFunc] = []
        self._defer_funcs: List[DeferFunc] = []
        self._cancel_funcs: List[CancelFunc] = []
        self._servers: List[Server] = []
        self._exit = ExitLatch(reporter)

    # ================================================================
    # Settings and reporter
    # ================================================================

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @settings.setter
    def settings(self, settings: Settings) -> None:
        self._settings = settings
        if not self._reporter_injected:
            # Rebuilt from the new settings on next use
            self._reporter = None

    @property
    def reporter(self) -> SystemReporter:
        if self._reporter is None:
            settings = self.settings
            self._reporter = create_reporter(
                log_level=settings.log_level,
                log_dir=settings.log_dir,
                verbose=settings.verbose,
            )
            self._exit.attach_reporter(self._reporter)
        return self._reporter

    @property
    def grace_period(self) -> float:
        """Explicit override, else settings.grace_period."""
        if self._grace_period is not None:
            return self._grace_period
        return self.settings.grace_period

    @grace_period.setter
    def grace_period(self, seconds: float) -> None:
        self._grace_period = seconds

    # ================================================================
    # Registration
    # ================================================================

    def _ensure_configurable(self, operation: str) -> None:
        if self.state != EngineState.CONFIGURED:
            raise EngineStateError(operation, self.state.value)

    def logger(self, reporter: SystemReporter) -> None:
        """Replace the reporter."""
        self._reporter = reporter
        self._reporter_injected = True
        self._exit.attach_reporter(reporter)

    def load_func(self, *fns: LoadFunc) -> None:
        """Append load functions, run first during startup."""
        self._ensure_configurable("register load functions")
        self._load_funcs.extend(fns)

    def defer_func(self, *fns: DeferFunc) -> None:
        """Append defer functions, run with the exit signal after loading."""
        self._ensure_configurable("register defer functions")
        self._defer_funcs.extend(fns)

    def cancel_func(self, *fns: CancelFunc) -> None:
        """Append cancel functions, run during shutdown after servers stop."""
        self._ensure_configurable("register cancel functions")
        self._cancel_funcs.extend(fns)

    def server(self, *servers: Server) -> None:
        """Append pre-constructed servers."""
        self._ensure_configurable("register servers")
        self._servers.extend(servers)

    def server_factory(self, *factories: ServerFactory) -> None:
        """
        Build servers from factories and append them in order.

        A raising factory stops registration; servers built by earlier
        factories stay registered.
        """
        self._ensure_configurable("register servers")
        for factory in factories:
            self._servers.append(factory())

    @property
    def exit_signal(self) -> ExitSignal:
        """Observer view of the exit signal."""
        return self._exit.signal

    @property
    def servers(self) -> List[Server]:
        return list(self._servers)

    def get_status(self) -> dict:
        """
        Get engine status information.

        Returns:
            Dictionary with state and registration counts
        """
        return {
            "state": self.state.value,
            "load_funcs": len(self._load_funcs),
            "defer_funcs": len(self._defer_funcs),
            "servers": len(self._servers),
            "cancel_funcs": len(self._cancel_funcs),
            "exit_closed": self._exit.is_closed(),
            "grace_period": self.grace_period,
        }

    # ================================================================
    # Run
    # ================================================================

    def _set_state(self, state: EngineState) -> None:
        self.state = state
        self.reporter.debug("state changed", context="Engine", state=state.value)

    def run(self) -> None:
        """
        Start the application and block until it shuts down.

        Raises:
            EngineStateError: If the engine already ran
            Exception: The first exception raised by a load function,
                defer function or server start
        """
        self._ensure_configurable("run")
        settings = self.settings

        try:
            self._set_state(EngineState.LOADING)
            for fn in self._load_funcs:
                call_with_timeout(
                    fn, seconds=settings.load_timeout, operation=_name(fn)
                )
            self.reporter.debug(
                "load phase complete",
                context="Engine",
                count=len(self._load_funcs),
            )

            self._set_state(EngineState.DEFERRING)
            for fn in self._defer_funcs:
                call_with_timeout(
                    fn,
                    self.exit_signal,
                    seconds=settings.defer_timeout,
                    operation=_name(fn),
                )
            self.reporter.debug(
                "defer phase complete",
                context="Engine",
                count=len(self._defer_funcs),
            )

            self._set_state(EngineState.STARTING)
            for server in self._servers:
                call_with_timeout(
                    server.start,
                    seconds=settings.start_timeout,
                    operation=f"{type(server).__name__}.start",
                )

            source = self.termination_source
            try:
                source.subscribe(termination_signals())
            except Exception:
                # Undo any handlers installed before the failure
                source.close()
                raise
        except Exception as e:
            self._set_state(EngineState.FAILED)
            self.reporter.error(
                f"Startup failed: {e}", context="Engine", error=type(e).__name__
            )
            raise

        self.reporter.debug(
            "application run success",
            context="Engine",
            servers=len(self._servers),
        )
        self._wait()

    def _wait(self) -> None:
        """Process termination signals until one ends the run."""
        source = self.termination_source
        self._set_state(EngineState.WAITING)

        try:
            while True:
                sig = source.receive()
                self.reporter.debug(
                    "get a signal", context="Engine", signal=signal_name(sig)
                )

                if sig in stop_signals():
                    self._shutdown(sig)
                    return
                if sig in reload_signals():
                    # Reserved for configuration reload
                    continue

                self.reporter.warning(
                    "Unexpected signal, exiting without graceful shutdown",
                    context="Engine",
                    signal=signal_name(sig),
                )
                self._set_state(EngineState.STOPPED)
                return
        finally:
            source.close()

    # ================================================================
    # Shutdown
    # ================================================================

    def _shutdown(self, sig) -> None:
        """
        Stop servers, run cancel functions, close the exit signal, then
        pause for the grace period.
        """
        self._set_state(EngineState.STOPPING)
        self.reporter.info(
            "Graceful shutdown initiated",
            context="Shutdown",
            signal=signal_name(sig),
        )

        servers = list(self._servers)
        if self.settings.reverse_stop_order:
            servers.reverse()

        for server in servers:
            server_name = type(server).__name__
            try:
                call_with_timeout(
                    server.graceful_stop,
                    seconds=self.settings.stop_timeout,
                    operation=f"{server_name}.graceful_stop",
                )
            except TimeoutError as e:
                self.reporter.error(str(e), context="Shutdown")
            except Exception as e:
                self.reporter.error(
                    f"Error stopping {server_name}: {e}", context="Shutdown"
                )

        for cancel in self._cancel_funcs:
            try:
                cancel()
            except Exception as e:
                self.reporter.error(
                    f"Error in cancel function {_name(cancel)}: {e}",
                    context="Shutdown",
                )

        self._exit.close()

        self.reporter.info(
            "Exit signal closed, waiting for background work",
            context="Shutdown",
            grace_period=self.grace_period,
        )
        time.sleep(self.grace_period)

        self._set_state(EngineState.STOPPED)
        self.reporter.info("Graceful shutdown complete", context="Shutdown")


# ================================================================
# Options
# ================================================================

Option = Callable[[Engine], None]


def with_logger(reporter: SystemReporter) -> Option:
    """Replace the default reporter."""

    def apply(engine: Engine) -> None:
        engine.logger(reporter)

    return apply


def with_load_funcs(*fns: LoadFunc) -> Option:
    """Append load functions."""

    def apply(engine: Engine) -> None:
        engine.load_func(*fns)

    return apply


def with_defer_funcs(*fns: DeferFunc) -> Option:
    """Append defer functions."""

    def apply(engine: Engine) -> None:
        engine.defer_func(*fns)

    return apply


def with_cancel_funcs(*fns: CancelFunc) -> Option:
    """Append cancel functions."""

    def apply(engine: Engine) -> None:
        engine.cancel_func(*fns)

    return apply


def with_servers(*servers: Server) -> Option:
    """Append pre-constructed servers."""

    def apply(engine: Engine) -> None:
        engine.server(*servers)

    return apply


def with_server_factories(*factories: ServerFactory) -> Option:
    """Build and append servers; a raising factory aborts new_engine()."""

    def apply(engine: Engine) -> None:
        engine.server_factory(*factories)

    return apply


def with_termination_source(source: TerminationSource) -> Option:
    """Replace the OS signal source."""

    def apply(engine: Engine) -> None:
        engine.termination_source = source

    return apply


def with_grace_period(seconds: float) -> Option:
    """Override the post-shutdown pause."""

    def apply(engine: Engine) -> None:
        engine.grace_period = seconds

    return apply


def with_settings(settings: Settings) -> Option:
    """Replace settings; the default reporter is rebuilt from them."""

    def apply(engine: Engine) -> None:
        engine.settings = settings

    return apply


def new_engine(*options: Option, settings: Optional[Settings] = None) -> Engine:
    """
    Build an engine and apply options in order.

    Args:
        *options: Values returned by the with_* helpers
        settings: Optional configuration (defaults to get_settings())

    Returns:
        Configured engine
    """
    engine = Engine(settings=settings)
    for option in options:
        option(engine)
    return engine
