"""
Core package providing the snapshot engine.

Architecture:
- Snapshot value type describing active states per level
- Immutable machine tree built once, bottom-up
- Pure transition function over (machine, snapshot, event)

Design Patterns:
- Composite Pattern for the machine tree and nested snapshots
- Builder Pattern for tree construction
- Strategy Pattern for per-level transition handlers

Cross-cutting:
- Configuration errors raised at construction
- Lazy diagnostic logging through an injected logger
"""

# Import order matters to avoid circular dependencies
from .errors import ConfigurationError, StatechartError, TransitionError
from .snapshot import EMPTY_SNAPSHOT, Snapshot
from .transition import TransitionInfo
from .machine.machine_type import MachineType
from .machine.state_machine import StateMachine
from .machine.machine_builder import MachineBuilder

__all__ = [
    # Errors
    "StatechartError",
    "ConfigurationError",
    "TransitionError",
    # Values
    "Snapshot",
    "EMPTY_SNAPSHOT",
    "TransitionInfo",
    # Machines
    "MachineType",
    "StateMachine",
    "MachineBuilder",
]
