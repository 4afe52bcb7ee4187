"""statechart: snapshot-based hierarchical state machine (statechart) engine

This package evaluates a statically declared tree of state machines. The tree
itself holds no notion of "current" state: every call to
``StateMachine.transition`` takes the previous ``Snapshot`` and an event and
returns a brand new ``Snapshot`` describing the whole tree.

Responsibilities:
    - Declarative construction of atomic, compound and parallel levels
    - Initial snapshot materialization for levels with no information
    - Event propagation through the active branches of the tree
    - Exactly-once execution of transition side effects

Interactions:
    - Client code through the builder and ``transition`` API
    - Python ``enum`` types for state values and events
    - Standard library ``logging`` for diagnostics

Cross-cutting Concerns:
    Thread Safety:
        - Machines are immutable after construction and may be shared
        - Snapshots are immutable values owned by the caller

    Error Handling:
        - Configuration errors surface at construction time
        - Unmatched events and unknown snapshot shapes fall back to defaults

    Logging:
        - Injected logger, lazily evaluated messages
        - Explicit verbosity configuration, no global state
"""

from statechart.core.errors import ConfigurationError, StatechartError, TransitionError
from statechart.core.machine.machine_builder import MachineBuilder
from statechart.core.machine.machine_type import MachineType
from statechart.core.machine.state_machine import StateMachine
from statechart.core.snapshot import EMPTY_SNAPSHOT, Snapshot
from statechart.core.transition import TransitionInfo
from statechart.runtime.logger import LoggerConfig, LogLevel, MachineLogger

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "EMPTY_SNAPSHOT",
    "LogLevel",
    "LoggerConfig",
    "MachineBuilder",
    "MachineLogger",
    "MachineType",
    "Snapshot",
    "StateMachine",
    "StatechartError",
    "TransitionError",
    "TransitionInfo",
]
