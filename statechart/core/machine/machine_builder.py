import threading
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Type

from statechart.core.errors import ConfigurationError
from statechart.core.machine.state_machine import StateMachine
from statechart.core.types import EventType, TransitionHandler
from statechart.runtime.logger import MachineLogger


class MachineBuilder:
    """Builds a statechart tree.

    MachineBuilder implements the Builder pattern to declare one machine
    level and, through ``sub_machine``, the levels nested under its states.
    ``build`` constructs the tree bottom-up: every sub-machine is built before
    the machine that owns it.

    Class Invariants:
    1. Sub-builders share the root context and logger
    2. Each builder produces at most one machine
    3. Configuration is validated when the machine is built

    Design Patterns:
    - Builder: Constructs machine levels
    - Composite: Sub-builders mirror the machine tree

    Threading/Concurrency Guarantees:
    1. Thread-safe declaration
    2. Built machines are immutable
    """

    def __init__(
        self,
        state_type: Type[Enum],
        event_type: EventType = object,
        context: Any = None,
        logger: Optional[MachineLogger] = None,
        possible_states: Optional[Sequence[Enum]] = None,
        parent_state: Optional[Enum] = None,
    ):
        """Initialize the builder for one machine level.

        Args:
            state_type: Enum class of the level's state values
            event_type: Class or tuple of classes the level's handler accepts
            context: Shared context handed to every handler in the tree
            logger: Diagnostic logger shared by the tree
            possible_states: Declared states, defaults to every member of state_type
            parent_state: Parent state value owning this level, None for the root
        """
        self._state_type = state_type
        self._event_type = event_type
        self._context = context
        self._logger = logger or MachineLogger()
        self._possible_states = possible_states
        self._parent_state = parent_state
        self._initial_state: Optional[Enum] = None
        self._transition_handler: Optional[TransitionHandler] = None
        self._sub_builders: List[MachineBuilder] = []
        self._built = False
        self._lock = threading.Lock()

    @property
    def state_type(self) -> Type[Enum]:
        """Get the Enum class of the level being built."""
        return self._state_type

    @property
    def parent_state(self) -> Optional[Enum]:
        """Get the parent state value owning the level being built."""
        return self._parent_state

    @property
    def sub_builders(self) -> List["MachineBuilder"]:
        """Get a copy of the nested level builders."""
        with self._lock:
            return list(self._sub_builders)

    def initial(self, initial_state: Enum) -> "MachineBuilder":
        """Set the state entered when the level has no information.

        Args:
            initial_state: One of the level's possible states

        Returns:
            This builder
        """
        with self._lock:
            self._check_not_built()
            self._initial_state = initial_state
        return self

    def transition_handler(self, handler: Optional[TransitionHandler]) -> "MachineBuilder":
        """Set the level's transition handler.

        Args:
            handler: Callable (context, state, event) -> TransitionInfo or None

        Returns:
            This builder
        """
        with self._lock:
            self._check_not_built()
            self._transition_handler = handler
        return self

    def sub_machine(
        self,
        parent_state: Enum,
        state_type: Type[Enum],
        event_type: EventType = object,
        configure: Optional[Callable[["MachineBuilder"], Any]] = None,
        possible_states: Optional[Sequence[Enum]] = None,
    ) -> "MachineBuilder":
        """Declare a sub-machine attached to one of this level's states.

        The sub-machine receives the root context when its handler is
        invoked; it never has a context of its own.

        Args:
            parent_state: State of this level the sub-machine belongs to
            state_type: Enum class of the sub-machine's states
            event_type: Class or tuple of classes the sub-machine's handler accepts
            configure: Optional callable receiving the sub-machine builder
            possible_states: Declared states of the sub-machine

        Returns:
            The sub-machine builder
        """
        sub_builder = MachineBuilder(
            state_type,
            event_type,
            context=self._context,
            logger=self._logger,
            possible_states=possible_states,
            parent_state=parent_state,
        )
        with self._lock:
            self._check_not_built()
            self._sub_builders.append(sub_builder)
        if configure is not None:
            configure(sub_builder)
        return sub_builder

    def build(self) -> StateMachine:
        """Build the machine and all of its sub-machines.

        The builder and its sub-builders are used up only when the whole tree
        builds. After a ConfigurationError the declaration can be corrected
        and ``build`` called again.

        Returns:
            The constructed machine

        Raises:
            ConfigurationError: If any level's declaration is invalid or the
                builder was already used
        """
        with self._lock:
            self._check_not_built()
            machine = self._construct()
            self._seal()
        return machine

    def _construct(self) -> StateMachine:
        # Caller holds self._lock; locks are taken parent before child
        children = []
        for sub_builder in self._sub_builders:
            with sub_builder._lock:
                children.append(sub_builder._construct())
        return StateMachine(
            self._state_type,
            event_type=self._event_type,
            possible_states=self._possible_states,
            initial_state=self._initial_state,
            children=children,
            transition_handler=self._transition_handler,
            context=self._context,
            parent_state=self._parent_state,
            logger=self._logger,
        )

    def _seal(self) -> None:
        self._built = True
        for sub_builder in self._sub_builders:
            with sub_builder._lock:
                sub_builder._seal()

    def _check_not_built(self) -> None:
        if self._built:
            raise ConfigurationError("Machine has already been built from this builder")
