"""
lib4bin Common Utilities

Exception hierarchy and logging setup shared by the lib4bin packages.
"""

from .exceptions import (
    Lib4binError, InputError, InputNotFoundError, NotARegularFileError,
    ToolError, ToolMissingError, LauncherMissingError, StripError, ProberError,
    ResolutionError, LayoutIOError, ConfigError, InvalidConfigError,
    MissingConfigError,
)
from .decorators import timed
from .logging_config import setup_logging, LogContext

__all__ = [
    # Exceptions
    "Lib4binError", "InputError", "InputNotFoundError", "NotARegularFileError",
    "ToolError", "ToolMissingError", "LauncherMissingError", "StripError",
    "ProberError", "ResolutionError", "LayoutIOError", "ConfigError",
    "InvalidConfigError", "MissingConfigError",
    # Decorators
    "timed",
    # Logging
    "setup_logging", "LogContext",
]
