"""
Exceptions raised by stack and environment operations.

Control-plane errors that are not classified here are raised unchanged as
``botocore.exceptions.ClientError``.
"""

from dataclasses import dataclass
from typing import Optional


class StageOpsError(Exception):
    """Base class for all stageops errors."""


class MissingConfigError(StageOpsError):
    """Home directory or AWS credential profile could not be found."""


@dataclass
class ConfigurationError(StageOpsError):
    """Raised when project configuration is invalid or cannot be loaded."""

    message: str
    details: Optional[str] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class StackNotFoundError(StageOpsError):
    """Describe or list was issued against a stack that does not exist."""


class StackOperationFailedError(StageOpsError):
    """A stack reached a status outside the set expected for the operation."""

    def __init__(self, operation: str, status: Optional[str] = None):
        self.operation = operation
        self.status = status
        verb = operation[:-1] if operation.endswith("e") else operation
        super().__init__(
            f"Something went wrong while {verb}ing your cloudformation "
            f"(status: {status or 'unknown'})"
        )


class StackWaitTimeoutError(StageOpsError):
    """Polling gave up before the stack reached a terminal status."""


class StackWaitCancelledError(StageOpsError):
    """Polling was cancelled by the caller."""


class ResourceNotFoundError(StageOpsError):
    """A logical resource id is absent from the stack's resource catalog."""

    def __init__(self, logical_id: str):
        self.logical_id = logical_id
        super().__init__(f"Unable to find resource with logical id {logical_id}")


class StorageWriteError(StageOpsError):
    """Writing a template or env file to storage failed."""
