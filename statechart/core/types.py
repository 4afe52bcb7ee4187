"""
Type definitions shared across the engine.

This module contains the type aliases used by the snapshot, transition and
machine modules. It helps break circular dependencies between modules and
provides a central location for type information.

Design:
- No runtime dependencies on other modules
- Only contains type aliases
- Provides type hints for static analysis
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Type, Union

if TYPE_CHECKING:
    from statechart.core.transition import TransitionInfo


# Class (or tuple of classes) an event must be an instance of for a level
EventType = Union[Type[Any], Tuple[Type[Any], ...]]

# Zero-argument procedure run once when a transition result is adopted
SideEffect = Callable[[], None]

# (context, active state, event) -> next state info, or None when not applicable
TransitionHandler = Callable[[Any, Enum, Any], Optional["TransitionInfo"]]

# Deferred log message producer, evaluated only when its level is enabled
LazyMessage = Callable[[], Optional[str]]
