"""
Diagnostic logging for the engine.

Architecture:
- Thin layer over the standard library ``logging`` module
- Messages are zero-argument callables evaluated only when enabled
- Verbosity is explicit configuration injected at root construction
- Never on a behavioral path: logging cannot change a transition result

Design Patterns:
- Proxy Pattern: Gates calls to a stdlib Logger
- Value Object: Immutable LoggerConfig

Responsibilities:
1. Level Management
   - Cumulative verbosity (ERROR up to TRACE)
   - Explicit level sets
   - ERROR always enabled

2. Message Emission
   - Lazy message evaluation
   - Optional call site prefix
   - Exception information on errors
"""

import inspect
import logging
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import FrozenSet, Iterable, Optional

from statechart.core.types import LazyMessage

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


class LogLevel(IntEnum):
    """Logging levels ordered from the least to the most verbose.

    Values are the matching standard library levels so they can be handed to
    ``logging.Logger.log`` directly.
    """

    ERROR = logging.ERROR
    WARN = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = TRACE_LEVEL

    @property
    def verbosity(self) -> int:
        """Rank of this level, 0 for ERROR up to 4 for TRACE."""
        return list(LogLevel).index(self)

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Look up a level by name, accepting ``WARNING`` for ``WARN``.

        Raises:
            ValueError: If the name is not a known level
        """
        key = name.strip().upper()
        if key == "WARNING":
            key = "WARN"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


@dataclass(frozen=True)
class LoggerConfig:
    """Logging configuration for a machine tree.

    Attributes:
        tag: Name of the stdlib logger, also used as message prefix with call site info
        max_level: Most verbose level enabled; every less verbose level is enabled too
        levels: Explicit set of enabled levels, overrides max_level when given
        call_site_info: Prefix messages with ``[module:function@line]``
    """

    tag: str = "statechart"
    max_level: LogLevel = LogLevel.ERROR
    levels: Optional[FrozenSet[LogLevel]] = None
    call_site_info: bool = False

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("Logger tag must be a non-empty string")
        if self.levels is not None:
            object.__setattr__(self, "levels", frozenset(LogLevel(level) for level in self.levels))

    @property
    def enabled_levels(self) -> FrozenSet[LogLevel]:
        """Get every level this configuration enables."""
        if self.levels is not None:
            return self.levels | {LogLevel.ERROR}
        return frozenset(level for level in LogLevel if level.verbosity <= self.max_level.verbosity)

    def with_max_level(self, level: LogLevel) -> "LoggerConfig":
        """Return a copy enabling every level up to the given one."""
        return replace(self, max_level=level, levels=None)

    def with_levels(self, levels: Iterable[LogLevel]) -> "LoggerConfig":
        """Return a copy enabling exactly the given levels (ERROR stays enabled)."""
        return replace(self, levels=frozenset(levels))


class MachineLogger:
    """Level-gated logger with lazily evaluated messages.

    A level is enabled when the configuration enables it and the underlying
    stdlib logger is enabled for it. The message callable is invoked only for
    enabled levels.
    """

    def __init__(self, config: Optional[LoggerConfig] = None, logger: Optional[logging.Logger] = None) -> None:
        """Initialize the logger.

        Args:
            config: Verbosity configuration, defaults to ``LoggerConfig()``
            logger: Stdlib logger to write to, defaults to ``logging.getLogger(config.tag)``
        """
        self._config = config or LoggerConfig()
        self._logger = logger or logging.getLogger(self._config.tag)
        self._enabled = self._config.enabled_levels

    @property
    def config(self) -> LoggerConfig:
        """Get the logger configuration."""
        return self._config

    @property
    def tag(self) -> str:
        """Get the logger tag."""
        return self._config.tag

    def is_level_enabled(self, level: LogLevel) -> bool:
        """Check if messages at the given level would be emitted."""
        return level in self._enabled and self._logger.isEnabledFor(level)

    def trace(self, lazy_message: LazyMessage) -> None:
        self._log(LogLevel.TRACE, lazy_message)

    def debug(self, lazy_message: LazyMessage) -> None:
        self._log(LogLevel.DEBUG, lazy_message)

    def info(self, lazy_message: LazyMessage) -> None:
        self._log(LogLevel.INFO, lazy_message)

    def warn(self, lazy_message: LazyMessage) -> None:
        self._log(LogLevel.WARN, lazy_message)

    def error(self, lazy_message: LazyMessage, exc_info: Optional[BaseException] = None) -> None:
        """Log at ERROR level, optionally with exception information.

        Args:
            lazy_message: Callable producing the message
            exc_info: Exception whose traceback is attached to the record
        """
        self._log(LogLevel.ERROR, lazy_message, exc_info=exc_info, call_site=True)

    def _log(
        self,
        level: LogLevel,
        lazy_message: LazyMessage,
        exc_info: Optional[BaseException] = None,
        call_site: bool = False,
    ) -> None:
        if not self.is_level_enabled(level):
            return
        message = lazy_message() or ""
        if call_site or self._config.call_site_info:
            message = f"{self.tag}: {self._call_site()} {message}"
        # stacklevel 3 attributes the record to the caller of trace/debug/...
        self._logger.log(int(level), message, exc_info=exc_info, stacklevel=3)

    @staticmethod
    def _call_site() -> str:
        frame = inspect.currentframe()
        try:
            # _call_site <- _log <- level method <- caller
            caller = frame.f_back.f_back.f_back if frame else None
            if caller is None:
                return "[unknown]"
            module = caller.f_globals.get("__name__", "?").rsplit(".", 1)[-1]
            return f"[{module}:{caller.f_code.co_name}@{caller.f_lineno}]"
        finally:
            del frame
