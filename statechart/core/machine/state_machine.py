"""
State machine tree node and transition algorithm.

Architecture:
- One StateMachine per level of the declared statechart
- Children keyed by the parent state value they attach to
- Stateless after construction: all current state lives in Snapshots
- Transition is a pure recursive function of (snapshot, event)

Design Patterns:
- Composite Pattern: Machines own their sub-machines
- Strategy Pattern: Per-level transition handler
- Template Method: Initial path vs next state path per classification

Responsibilities:
1. Classification
   - Derived once from initial state and children
   - Atomic / parallel / compound dispatch

2. Initial State Materialization
   - Builds complete snapshots for levels with no information
   - Never invokes a transition handler

3. Next State Computation
   - Applies the active level's handler
   - Runs adopted side effects exactly once
   - Re-routes into the sub-machine of the next state

Cross-cutting:
- Configuration validated at construction
- Unmatched events are no-ops
- Diagnostic logging through the injected MachineLogger
"""

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, Type

from statechart.core.errors import ConfigurationError, TransitionError
from statechart.core.machine.machine_type import MachineType
from statechart.core.snapshot import EMPTY_SNAPSHOT, Snapshot
from statechart.core.transition import TransitionInfo
from statechart.core.types import EventType, TransitionHandler
from statechart.runtime.logger import MachineLogger

if TYPE_CHECKING:
    from statechart.core.machine.machine_builder import MachineBuilder


class StateMachine:
    """A level of a hierarchical state machine.

    Holds the declared shape of one level: its possible state values, an
    optional initial state, the sub-machines attached to some of its states
    and an optional transition handler. The machine itself never records
    which state is active; callers pass the previous Snapshot into
    ``transition`` and keep the Snapshot it returns.

    Class Invariants:
    1. Classification never changes after construction
    2. At most one sub-machine per parent state value
    3. Sub-machines only attach to declared possible states
    4. A level with a transition handler has an initial state
    5. Handlers at every level receive the context of the root the transition started from
    6. The same logger is shared by the whole tree

    Threading/Concurrency Guarantees:
    1. Immutable after construction
    2. Safe to share across threads, each caller owning its Snapshot
    """

    def __init__(
        self,
        state_type: Type[Enum],
        event_type: EventType = object,
        possible_states: Optional[Sequence[Enum]] = None,
        initial_state: Optional[Enum] = None,
        children: Iterable["StateMachine"] = (),
        transition_handler: Optional[TransitionHandler] = None,
        context: Any = None,
        parent_state: Optional[Enum] = None,
        logger: Optional[MachineLogger] = None,
    ) -> None:
        """Initialize a machine level.

        Args:
            state_type: Enum class of this level's state values
            event_type: Class or tuple of classes the handler accepts
            possible_states: Declared states, defaults to every member of state_type
            initial_state: State entered when the level has no information
            children: Sub-machines, each attached to one of the possible states
            transition_handler: Callable (context, state, event) -> TransitionInfo or None
            context: Shared context handed to every handler in the tree. Only the
                root's context is used; a sub-machine's own context is ignored
            parent_state: State value of the parent level owning this machine, None for the root
            logger: Diagnostic logger, defaults to a MachineLogger with default config

        Raises:
            ConfigurationError: If the declaration is invalid
        """
        if not isinstance(state_type, type) or not issubclass(state_type, Enum):
            raise ConfigurationError("State type must be an Enum subclass")

        states: Tuple[Enum, ...] = tuple(possible_states) if possible_states is not None else tuple(state_type)
        if not states:
            raise ConfigurationError(f"{state_type.__name__} declares no possible states")
        for state in states:
            if not isinstance(state, state_type):
                raise ConfigurationError(f"Possible state {state!r} is not a {state_type.__name__} member")

        if initial_state is not None and initial_state not in states:
            raise ConfigurationError(f"Initial state {initial_state!r} is not one of the possible states")

        if transition_handler is not None:
            if not callable(transition_handler):
                raise ConfigurationError("Transition handler must be callable")
            if initial_state is None:
                raise ConfigurationError(
                    f"Machine for {state_type.__name__} declares a transition handler but no initial state"
                )

        owned = {}
        for child in children:
            if child.parent_state not in states:
                raise ConfigurationError(
                    f"Sub-machine attached to {child.parent_state!r} which is not a possible state"
                )
            if child.parent_state in owned:
                raise ConfigurationError(f"State {child.parent_state!r} already has a sub-machine")
            owned[child.parent_state] = child

        self._state_type = state_type
        self._event_type = event_type
        self._possible_states = states
        self._initial_state = initial_state
        self._children: Mapping[Enum, StateMachine] = MappingProxyType(owned)
        self._transition_handler = transition_handler
        self._context = context
        self._parent_state = parent_state
        self._logger = logger or MachineLogger()
        self._machine_type = MachineType.classify(initial_state is not None, bool(owned))

    @classmethod
    def create(
        cls,
        context: Any,
        state_type: Type[Enum],
        event_type: EventType = object,
        configure: Optional[Callable[["MachineBuilder"], Any]] = None,
        logger: Optional[MachineLogger] = None,
    ) -> "StateMachine":
        """Build a root machine.

        Args:
            context: Shared context handed to every handler in the tree
            state_type: Enum class of the root level
            event_type: Class or tuple of classes the root handler accepts
            configure: Callable receiving the root MachineBuilder
            logger: Diagnostic logger for the whole tree

        Returns:
            The constructed root machine

        Raises:
            ConfigurationError: If the declaration is invalid
        """
        from statechart.core.machine.machine_builder import MachineBuilder

        builder = MachineBuilder(state_type, event_type, context=context, logger=logger)
        if configure is not None:
            configure(builder)
        return builder.build()

    @property
    def state_type(self) -> Type[Enum]:
        """Get the Enum class of this level's state values."""
        return self._state_type

    @property
    def event_type(self) -> EventType:
        """Get the event class(es) this level's handler accepts."""
        return self._event_type

    @property
    def possible_states(self) -> Tuple[Enum, ...]:
        """Get the declared state values, in declaration order."""
        return self._possible_states

    @property
    def initial_state(self) -> Optional[Enum]:
        """Get the initial state, None for parallel levels."""
        return self._initial_state

    @property
    def children(self) -> Mapping[Enum, "StateMachine"]:
        """Get a read-only mapping of parent state value to sub-machine."""
        return self._children

    @property
    def parent_state(self) -> Optional[Enum]:
        """Get the parent state value this machine is attached to."""
        return self._parent_state

    @property
    def context(self) -> Any:
        """Get the context this machine hands to handlers when it is the root."""
        return self._context

    @property
    def logger(self) -> MachineLogger:
        """Get the diagnostic logger."""
        return self._logger

    @property
    def machine_type(self) -> MachineType:
        """Get the classification flags."""
        return self._machine_type

    @property
    def is_atomic(self) -> bool:
        return MachineType.ATOMIC in self._machine_type

    @property
    def is_parallel(self) -> bool:
        return MachineType.PARALLEL in self._machine_type

    @property
    def is_compound(self) -> bool:
        return MachineType.COMPOUND in self._machine_type

    def sub_machine_for(self, state: Enum) -> Optional["StateMachine"]:
        """Get the sub-machine attached to a state value, if any."""
        return self._children.get(state)

    def transition(self, snapshot: Optional[Snapshot], event: Any) -> Snapshot:
        """Compute the next snapshot of this level and everything below it.

        A snapshot that does not describe this level (empty, None, or holding
        values of another state type) is treated as "no information" and an
        initial snapshot is built instead. Handlers of every sub-machine
        receive this machine's context.

        Args:
            snapshot: Previous snapshot for this level
            event: The event to process

        Returns:
            A complete snapshot for this level

        Raises:
            TransitionError: If a handler or side effect fails
        """
        return self._transition(snapshot, event, self._context)

    def _transition(self, snapshot: Optional[Snapshot], event: Any, context: Any) -> Snapshot:
        if snapshot is None:
            snapshot = EMPTY_SNAPSHOT
        if snapshot.belongs_to(self._state_type):
            return self._transition_to_next(snapshot, event, context)
        return self._transition_to_initial(snapshot, event, context)

    def _transition_to_initial(self, snapshot: Snapshot, event: Any, context: Any) -> Snapshot:
        self._logger.info(lambda: f"Taking initial state path for machine associated with {self._owner_name()}")
        if self._machine_type.has_types(MachineType.ATOMIC, MachineType.PARALLEL):
            return Snapshot.from_values(self._possible_states)
        if MachineType.ATOMIC in self._machine_type:
            return Snapshot.from_value(self._initial_state)
        if MachineType.PARALLEL in self._machine_type:
            return Snapshot.from_pairs(
                (state, self._transition_child(state, snapshot, event, context)) for state in self._possible_states
            )
        # Compound with children: descend into the initial state's branch
        return Snapshot.from_pair(
            self._initial_state, self._transition_child(self._initial_state, snapshot, event, context)
        )

    def _transition_to_next(self, snapshot: Snapshot, event: Any, context: Any) -> Snapshot:
        if self._machine_type.has_types(MachineType.ATOMIC, MachineType.PARALLEL):
            return Snapshot.from_values(self._possible_states)
        if MachineType.PARALLEL in self._machine_type:
            # No handler of its own, forward to every sub-machine
            return Snapshot.from_pairs(
                (state, self._transition_child(state, snapshot.sub_snapshot_for(state), event, context))
                for state in self._possible_states
            )

        # Exactly one active value on compound levels
        active = snapshot.active_values()[0]
        if active not in self._possible_states:
            self._logger.warn(
                lambda: f"Undeclared state {active} in snapshot for machine associated with {self._owner_name()}"
            )
            return self._transition_to_initial(snapshot, event, context)

        next_state = self._next_state(active, event, context)
        if MachineType.ATOMIC in self._machine_type:
            return Snapshot.from_value(next_state)
        return Snapshot.from_pair(
            next_state, self._transition_child(next_state, snapshot.sub_snapshot_for(next_state), event, context)
        )

    def _transition_child(self, state: Enum, snapshot: Snapshot, event: Any, context: Any) -> Snapshot:
        child = self._children.get(state)
        if child is None:
            return EMPTY_SNAPSHOT
        return child._transition(snapshot, event, context)

    def _next_state(self, active: Enum, event: Any, context: Any) -> Enum:
        """Apply the transition handler to the active state.

        The side effect runs only when the handler moves the level to a
        different state.

        Args:
            active: The currently active state value
            event: The event to process
            context: Context of the root machine

        Returns:
            The adopted next state, or the active state if no transition applies

        Raises:
            TransitionError: If the handler or side effect fails, or the handler
                returns an invalid result
        """
        if self._transition_handler is None:
            return active
        if not isinstance(event, self._event_type):
            self._logger.warn(
                lambda: f"Wrong event {event!r} passed to machine associated with {self._owner_name()}"
            )
            return active

        try:
            info = self._transition_handler(context, active, event)
        except Exception as e:
            raise TransitionError(f"Transition handler failed in state {active}: {e}") from e

        if info is None:
            return active
        if not isinstance(info, TransitionInfo):
            raise TransitionError(f"Transition handler returned {info!r}, expected TransitionInfo or None")
        if info.value not in self._possible_states:
            raise TransitionError(f"Transition target {info.value!r} is not a possible state of this machine")
        if info.value == active:
            self._logger.trace(lambda: f"{self._owner_name()}: staying in {active} on {event!r}")
            return active

        self._logger.debug(lambda: f"{self._owner_name()}: {active} -> {info.value} on {event!r}")
        try:
            info.run_side_effect()
        except Exception as e:
            raise TransitionError(f"Side effect failed for {active} -> {info.value}: {e}") from e
        return info.value

    def _owner_name(self) -> str:
        return "ROOT" if self._parent_state is None else str(self._parent_state)

    def __repr__(self) -> str:
        return (
            f"StateMachine(state_type={self._state_type.__name__}, "
            f"machine_type={self._machine_type}, parent_state={self._parent_state})"
        )
