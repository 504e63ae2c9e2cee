"""
lib4bin Exception Hierarchy

Provides clear, actionable error messages with structured information
for logging, the run report, and per-binary failure handling.
"""

from typing import Optional, Dict, Any


class Lib4binError(Exception):
    """
    Base exception for all lib4bin errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context as key-value pairs
        cause: Original exception that caused this error
        recoverable: Whether the batch can continue after this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable

    def __str__(self):
        s = f"[{self.code}] {self.message}"
        if self.details:
            s += f" (details: {self.details})"
        if self.cause:
            s += f" caused by: {self.cause}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Input errors
# =============================================================================

class InputError(Lib4binError):
    """Input path cannot be processed."""
    def __init__(self, path: str, reason: str, code: str = "INVALID_INPUT"):
        super().__init__(
            f"{path}: {reason}",
            code=code,
            details={"path": path, "reason": reason},
        )


class InputNotFoundError(InputError):
    """Input path does not exist."""
    def __init__(self, path: str, cause: Optional[Exception] = None):
        super().__init__(path, "no such file", code="INPUT_NOT_FOUND")
        self.cause = cause


class NotARegularFileError(InputError):
    """Input path exists but is a directory, device, socket..."""
    def __init__(self, path: str):
        super().__init__(path, "not a regular file", code="NOT_A_REGULAR_FILE")


# =============================================================================
# External tool errors
# =============================================================================

class ToolError(Lib4binError):
    """Base for external tool errors."""
    pass


class ToolMissingError(ToolError):
    """Required tool not found on the search path."""
    def __init__(self, tool: str, recoverable: bool = True):
        super().__init__(
            f"{tool} not found in PATH",
            code="TOOL_MISSING",
            details={"tool": tool},
            recoverable=recoverable,
        )


class LauncherMissingError(ToolMissingError):
    """Relocatable launcher not found; no dynamic binary can be bundled."""
    def __init__(self, launcher: str):
        super().__init__(launcher, recoverable=False)
        self.code = "LAUNCHER_MISSING"


class StripError(ToolError):
    """Stripper ran but failed."""
    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to strip {path}: {reason}",
            code="STRIP_FAILED",
            details={"path": path, "reason": reason},
        )


class ProberError(ToolError):
    """Linkage prober could not produce a report."""
    def __init__(self, path: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Cannot probe {path}: {reason}",
            code="PROBE_FAILED",
            details={"path": path, "reason": reason},
            cause=cause,
        )


# =============================================================================
# Dependency resolution errors
# =============================================================================

class ResolutionError(Lib4binError):
    """Shared-library closure could not be enumerated."""
    def __init__(
        self,
        path: str,
        reason: str,
        missing: Optional[list] = None,
        cause: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {"path": path, "reason": reason}
        if missing:
            details["missing"] = missing
        super().__init__(
            f"Cannot resolve dependencies of {path}: {reason}",
            code="RESOLUTION_FAILED",
            details=details,
            cause=cause,
        )


# =============================================================================
# Output layout errors
# =============================================================================

class LayoutIOError(Lib4binError):
    """A copy/mkdir/symlink/chmod on the output tree failed."""
    def __init__(self, path: str, operation: str, cause: Optional[Exception] = None):
        reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else str(cause)
        super().__init__(
            f"{operation} failed for {path}: {reason}",
            code="IO_FAILED",
            details={"path": path, "operation": operation},
            cause=cause,
        )


# =============================================================================
# Configuration errors
# =============================================================================

class ConfigError(Lib4binError):
    """Base for configuration errors."""
    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration."""
    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration: {field}={value}: {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value), "reason": reason},
            recoverable=False,
        )


class MissingConfigError(ConfigError):
    """Required configuration missing."""
    def __init__(self, field: str):
        super().__init__(
            f"Missing required configuration: {field}",
            code="MISSING_CONFIG",
            details={"field": field},
            recoverable=False,
        )
