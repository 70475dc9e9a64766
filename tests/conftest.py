"""
Test fixtures and configuration.
"""

import pytest

from regisseur.config import Settings, reset_settings
from regisseur.lifecycle import QueueSignalSource
from regisseur.reporter import SystemReporter


@pytest.fixture(autouse=True)
def clean_settings():
    """Each test starts without a cached settings singleton."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    """Settings with no grace period."""
    return Settings(grace_period=0.0, log_level="debug")


@pytest.fixture
def source() -> QueueSignalSource:
    """In-memory termination source."""
    return QueueSignalSource()


@pytest.fixture
def reporter() -> SystemReporter:
    """Debug reporter writing to stdout."""
    return SystemReporter(name="regisseur-test", level=10, verbose=3)
