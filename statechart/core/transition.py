"""
Transition result returned by a level's transition handler.

A handler never mutates anything itself. It describes the next state value
and hands the engine a side effect which the engine runs exactly once if,
and only if, the result moves its level to a different state.
"""

from dataclasses import dataclass, field
from enum import Enum

from statechart.core.types import SideEffect


def _no_side_effect() -> None:
    pass


@dataclass(frozen=True)
class TransitionInfo:
    """The next state value and side effect pair for a transition.

    Attributes:
        value: State value the level moves to
        side_effect: Procedure run once when the engine adopts this result
    """

    value: Enum
    side_effect: SideEffect = field(default=_no_side_effect, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, Enum):
            raise TypeError("Transition value must be an Enum member")
        if not callable(self.side_effect):
            raise TypeError("Side effect must be callable")

    def run_side_effect(self) -> None:
        """Execute the side effect."""
        self.side_effect()
