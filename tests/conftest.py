import logging
import threading
from enum import Enum
from unittest.mock import MagicMock

import pytest

from statechart.runtime.logger import LoggerConfig, LogLevel, MachineLogger


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "stress: mark test as a stress test")


class Light(Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


class Tick(Enum):
    TIMER = "timer"


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from statechart.core.errors import ConfigurationError, StatechartError, TransitionError

    return (StatechartError, ConfigurationError, TransitionError)


@pytest.fixture
def light_type():
    """A three state Enum used by simple machines."""
    return Light


@pytest.fixture
def tick_type():
    """A single event Enum used by simple machines."""
    return Tick


@pytest.fixture
def side_effect():
    """A side effect mock for counting invocations."""
    return MagicMock(name="side_effect")


@pytest.fixture
def verbose_logger():
    """A MachineLogger with every level enabled, writing to a test logger."""
    std_logger = logging.getLogger("statechart.tests")
    std_logger.setLevel(logging.NOTSET)
    return MachineLogger(LoggerConfig(tag="statechart.tests", max_level=LogLevel.TRACE), logger=std_logger)


@pytest.fixture
def light_machine(side_effect):
    """RED -> YELLOW -> GREEN -> RED on TIMER, starting at RED."""
    from statechart.core.machine.machine_builder import MachineBuilder
    from statechart.core.transition import TransitionInfo

    cycle = {Light.RED: Light.YELLOW, Light.YELLOW: Light.GREEN, Light.GREEN: Light.RED}

    def handler(context, state, event):
        if event is Tick.TIMER:
            return TransitionInfo(cycle[state], side_effect)
        return None

    return MachineBuilder(Light, Tick).initial(Light.RED).transition_handler(handler).build()


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive():
            thread.join(timeout=1.0)
