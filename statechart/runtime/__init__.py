"""
Runtime package for diagnostics.

Architecture:
- Injected logging capability shared by a machine tree
- Explicit verbosity configuration, no process-wide state

Cross-cutting:
- Lazy message evaluation
- Thread safety through immutable configuration
"""

from .logger import LoggerConfig, LogLevel, MachineLogger

__all__ = ["LoggerConfig", "LogLevel", "MachineLogger"]
