class StatechartError(Exception):
    """
    Base exception class for errors raised by the statechart engine.
    """


class ConfigurationError(StatechartError):
    """
    Raised when a machine declaration is invalid. Always raised while the tree
    is being constructed, never while it is evaluating a transition.
    """


class TransitionError(StatechartError):
    """
    Raised when user supplied transition code fails: a handler or side effect
    raises, or a handler returns something that is not a valid transition
    result for its level.
    """
