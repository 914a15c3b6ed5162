"""
Error handling for swaybar status blocks.

Every failure a block, its probe, or the scheduler can raise is a BlockError
subclass carrying a structured code, so the status generator can log it
uniformly and never crash the bar.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for swaybar blocks.

    Custom codes:
    - 1100-1199: Configuration errors
    - 1200-1299: Probe errors (files, processes)
    - 1300-1399: Scheduler errors
    """

    # Configuration errors (1100-1199)
    CONFIG_NOT_FOUND = 1100
    CONFIG_PARSE_FAILED = 1101
    INVALID_BLOCK_CONFIG = 1102
    UNKNOWN_BLOCK = 1103

    # Probe errors (1200-1299)
    FILE_NOT_FOUND = 1200
    FILE_READ_ERROR = 1201
    PERMISSION_DENIED = 1202
    COMMAND_NOT_FOUND = 1203
    COMMAND_TIMEOUT = 1204
    COMMAND_FAILED = 1205
    UNEXPECTED_OUTPUT = 1206

    # Scheduler errors (1300-1399)
    CHANNEL_CLOSED = 1300


class BlockError(Exception):
    """Base exception for status block errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize block error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigError(BlockError):
    """Invalid configuration; the affected block is never created."""


class ProbeError(BlockError):
    """A system probe could not be evaluated."""

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> "ProbeError":
        """
        Convert an OSError raised while reading a probe file.

        Args:
            path: File the probe tried to read
            error: Underlying OS error

        Returns:
            ProbeError with the matching error code
        """
        if isinstance(error, FileNotFoundError):
            code = ErrorCode.FILE_NOT_FOUND
        elif isinstance(error, PermissionError):
            code = ErrorCode.PERMISSION_DENIED
        else:
            code = ErrorCode.FILE_READ_ERROR

        return cls(
            code=code,
            message=f"Cannot read {path}: {error.strerror or error}",
            suggestion="Check that the file exists and is readable by the bar user",
            context={"path": path}
        )


class ScheduleError(BlockError):
    """The scheduler side of the update channel is gone."""

    def __init__(self, reason: str, context: Optional[Dict[str, Any]] = None):
        """
        Initialize schedule error.

        Args:
            reason: Reason the request could not be delivered
            context: Additional context for debugging
        """
        super().__init__(
            code=ErrorCode.CHANNEL_CLOSED,
            message=f"Update request not delivered: {reason}",
            context=context
        )
