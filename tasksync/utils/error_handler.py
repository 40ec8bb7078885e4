"""
Error handling utilities

Every failure the sync engine knows about is a TaskSyncError carrying an
ErrorKind tag. The transport raises NetworkError or ServiceError, the
controller raises ValidationError locally and ConfigurationError comes from
settings/client construction. Callers branch on ``error.kind``.
"""

from enum import Enum
from typing import Optional
from tasksync.models.response import SyncResult
from tasksync.utils.logger import logger


class ErrorKind(str, Enum):
    """Tag attached to every TaskSyncError"""
    CONFIGURATION = "configuration"
    NETWORK = "network"
    SERVICE = "service"
    VALIDATION = "validation"


class TaskSyncError(Exception):
    """Base exception for task sync errors"""
    kind: ErrorKind = ErrorKind.SERVICE

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(TaskSyncError):
    """No task service address could be resolved"""
    kind = ErrorKind.CONFIGURATION


class NetworkError(TaskSyncError):
    """The request never reached the service (connection, DNS, TLS, timeout)"""
    kind = ErrorKind.NETWORK

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to reach {url}" + (f": {reason}" if reason else ""))


class ServiceError(TaskSyncError):
    """The service answered with a non-success status"""
    kind = ErrorKind.SERVICE

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP error! status: {status_code}")


class ValidationError(TaskSyncError):
    """Local precondition failure, never sent to the service"""
    kind = ErrorKind.VALIDATION


def format_error_message(action: str, error: TaskSyncError, retry_hint: bool = False) -> str:
    """
    Format error message for user

    Args:
        action: What was being attempted, e.g. "add task"
        error: Error to format
        retry_hint: Ask the user to try again later (service errors only)

    Returns:
        User-friendly error message
    """
    if error.kind == ErrorKind.NETWORK:
        return (
            f"Could not {action}: unable to reach the server ({error.url}). "
            f"Check the network or CORS/HTTPS settings."
        )

    if error.kind == ErrorKind.CONFIGURATION:
        return f"Could not {action}: the task service address is not configured."

    message = f"Could not {action}: {error.message}."
    if retry_hint:
        message += " Please try again later."
    return message


def handle_error(action: str, error: TaskSyncError, retry_hint: bool = False) -> SyncResult:
    """
    Log error and return a failed result with a user-friendly message

    Args:
        action: What was being attempted
        error: Error to handle
        retry_hint: Passed through to format_error_message

    Returns:
        Failed SyncResult
    """
    if error.kind == ErrorKind.VALIDATION:
        logger.debug(f"Rejected {action}: {error.message}")
        return SyncResult(success=False, error_kind=error.kind.value, message=error.message)

    logger.error(f"Failed to {action}: {error}")
    return SyncResult(
        success=False,
        error_kind=error.kind.value,
        message=format_error_message(action, error, retry_hint),
    )
