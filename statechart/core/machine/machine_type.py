from enum import Flag, auto


class MachineType(Flag):
    """Classification flags of a machine level.

    Flags are independent: ATOMIC says whether there is a sub-machine to
    descend into, PARALLEL and COMPOUND say how the level selects its active
    values.
    """

    ATOMIC = auto()  # No sub-machine below this level
    PARALLEL = auto()  # Every declared state is active at once
    COMPOUND = auto()  # Exactly one active state, initial state required

    @classmethod
    def classify(cls, has_initial: bool, has_children: bool) -> "MachineType":
        """Derive the classification of a level from its declared shape.

        Args:
            has_initial: Whether the level declares an initial state
            has_children: Whether the level owns any sub-machine

        Returns:
            The combined classification flags
        """
        machine_type = cls.COMPOUND if has_initial else cls.PARALLEL
        if not has_children:
            machine_type |= cls.ATOMIC
        return machine_type

    def has_types(self, *types: "MachineType") -> bool:
        """Check if every given flag is set."""
        return all(t in self for t in types)
