"""
Error taxonomy for usage acquisition.

Every failure reaching a caller is one of these categories.
"""

from enum import Enum
from typing import Optional


class FailureReason(Enum):
    """Refinement of a failed ccusage run, derived from its stderr."""
    MISSING_BINARY = "missing_binary"
    NOT_ACCESSIBLE = "not_accessible"
    ACCESS_DENIED = "access_denied"
    SESSION = "session"
    GENERIC = "generic"
    UNEXPECTED = "unexpected"


class UsageError(Exception):
    """Base class for all usage acquisition failures."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExecutionError(UsageError):
    """Raised when the external program cannot be started at all."""
    def __init__(self, message: str, os_error: Optional[OSError] = None):
        super().__init__(message)
        self.os_error = os_error


class ExecutionTimeout(ExecutionError):
    """Raised when the external program did not finish in time and was killed."""
    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout


class ExecutionNotFound(UsageError):
    """A required executable could not be found.

    component is "tool" or "runtime" when that path was the bare fallback
    name, None when both paths were concrete (broken install).
    """
    def __init__(self, message: str, component: Optional[str] = None):
        super().__init__(message)
        self.component = component


class PermissionDenied(UsageError):
    """An executable was located but could not be run by the current user."""


class ExecutionFailed(UsageError):
    """ccusage ran and exited with a nonzero status."""
    def __init__(
        self,
        message: str,
        command: str,
        stderr: str = "",
        exit_status: Optional[int] = None,
        reason: FailureReason = FailureReason.GENERIC
    ):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.exit_status = exit_status
        self.reason = reason


class MalformedResponse(UsageError):
    """ccusage output did not match the expected JSON shape."""
    def __init__(self, message: str, command: str, detail: str):
        super().__init__(message)
        self.command = command
        self.detail = detail


class InvalidDate(UsageError):
    """A calendar computation failed while aggregating."""
