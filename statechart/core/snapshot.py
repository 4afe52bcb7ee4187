"""
Snapshot value type.

Architecture:
- Immutable record of the active state values of one machine level
- Each active value owns the nested snapshot of its sub-machine
- Recursive structure mirrors the machine tree
- A single empty sentinel stands for "no information below this point"

Design Patterns:
- Value Object: Structural equality and hashing
- Composite Pattern: Nested snapshots per active value
- Null Object: EMPTY sentinel instead of None

Responsibilities:
1. Active State Queries
   - Active values at this level
   - Nested snapshot lookup per value
   - Level ownership check against a state type

2. Construction
   - Single value, multiple values, explicit pairs
   - Empty sentinel

3. Presentation
   - Compact repr
   - Indented multi-line rendering

Cross-cutting:
- Never mutated after construction
- Safe to share between threads
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Type


class Snapshot:
    """The active state values of one level and their nested snapshots.

    A Snapshot maps every active state value of a machine level to the
    Snapshot of the sub-machine owned by that value. Values without a
    sub-machine, or whose sub-machine has nothing to report, map to the
    empty sentinel.

    Class Invariants:
    1. Never mutated after construction
    2. Keys are unique (enforced by the backing mapping)
    3. Any snapshot without active values equals the EMPTY sentinel
    4. Equality and hashing are structural and recursive
    """

    __slots__ = ("_values", "_hash")

    EMPTY: "Snapshot"

    def __init__(self, values: Optional[Mapping[Enum, "Snapshot"]] = None) -> None:
        """Initialize a Snapshot from a mapping of state value to nested snapshot.

        Args:
            values: Mapping of active state value to nested Snapshot. The
                mapping is copied; later changes to it have no effect.

        Raises:
            TypeError: If a nested value is not a Snapshot
        """
        copied = dict(values) if values else {}
        for value, sub_snapshot in copied.items():
            if not isinstance(sub_snapshot, Snapshot):
                raise TypeError(f"Nested state for {value!r} must be a Snapshot")
        self._values: Mapping[Enum, Snapshot] = MappingProxyType(copied)
        self._hash: Optional[int] = None

    # Constructors

    @classmethod
    def empty(cls) -> "Snapshot":
        """Return the empty sentinel."""
        return EMPTY_SNAPSHOT

    @classmethod
    def from_value(cls, value: Enum) -> "Snapshot":
        """Create a snapshot with a single active value and no nested state."""
        return cls({value: EMPTY_SNAPSHOT})

    @classmethod
    def from_values(cls, values: Iterable[Enum]) -> "Snapshot":
        """Create a snapshot where every given value is active with no nested state."""
        return cls({value: EMPTY_SNAPSHOT for value in values})

    @classmethod
    def from_pair(cls, value: Enum, sub_snapshot: "Snapshot") -> "Snapshot":
        """Create a snapshot with a single active value and its nested snapshot."""
        return cls({value: sub_snapshot})

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Enum, "Snapshot"]]) -> "Snapshot":
        """Create a snapshot from (value, nested snapshot) pairs.

        Later pairs for the same value replace earlier ones.
        """
        return cls(dict(pairs))

    # Queries

    @property
    def value_map(self) -> Mapping[Enum, "Snapshot"]:
        """Get a read-only view of the value to nested snapshot mapping."""
        return self._values

    @property
    def is_empty(self) -> bool:
        """Check if this snapshot carries no active values."""
        return not self._values

    def active_values(self) -> List[Enum]:
        """Get the active values of this level, in insertion order.

        Returns:
            List of active state values, empty for the sentinel
        """
        return list(self._values)

    def sub_snapshot_for(self, value: Enum) -> "Snapshot":
        """Get the nested snapshot recorded for a state value.

        Args:
            value: The state value to look up

        Returns:
            The nested Snapshot, or the empty sentinel if none was recorded
        """
        return self._values.get(value, EMPTY_SNAPSHOT)

    def belongs_to(self, state_type: Type[Enum]) -> bool:
        """Check whether this snapshot describes a level of the given state type.

        The empty sentinel carries no information for any level and answers
        False, which sends the caller down the initial state path.

        Args:
            state_type: Enum class of the level being evaluated

        Returns:
            True if the active values are members of state_type
        """
        if self.is_empty:
            return False
        first = next(iter(self._values))
        return isinstance(first, state_type)

    # Container protocol

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Enum]:
        return iter(self._values)

    def __contains__(self, value: Any) -> bool:
        return value in self._values

    def __eq__(self, other: object) -> bool:
        """Check if two snapshots are structurally equal.

        Args:
            other: Object to compare with

        Returns:
            True if both carry the same values with equal nested snapshots
        """
        if not isinstance(other, Snapshot):
            return NotImplemented
        if self is other:
            return True
        return dict(self._values) == dict(other._values)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._values.items()))
        return self._hash

    def __repr__(self) -> str:
        if self.is_empty:
            return "Snapshot.EMPTY"
        items = ", ".join(f"{value!s}: {sub!r}" for value, sub in self._values.items())
        return f"Snapshot({{{items}}})"

    def __str__(self) -> str:
        return self.pretty()

    def pretty(self, indent: int = 2) -> str:
        """Render the snapshot as an indented tree.

        Values without nested state are shown as ``(NA)``.

        Args:
            indent: Number of spaces per nesting level

        Returns:
            Multi-line string representation
        """
        lines = ["{"]
        self._render(lines, 1, indent)
        lines.append("}")
        return "\n".join(lines)

    def _render(self, lines: List[str], depth: int, indent: int) -> None:
        pad = " " * (depth * indent)
        for value, sub_snapshot in self._values.items():
            if sub_snapshot.is_empty:
                lines.append(f"{pad}{value!s} : (NA)")
            else:
                lines.append(f"{pad}{value!s} : {{")
                sub_snapshot._render(lines, depth + 1, indent)
                lines.append(f"{pad}}}")


EMPTY_SNAPSHOT = Snapshot()
Snapshot.EMPTY = EMPTY_SNAPSHOT
