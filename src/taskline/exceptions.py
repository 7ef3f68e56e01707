"""Error taxonomy for taskline.

Every error a user can trigger with a single command derives from
TaskError and is reported without ending the session. StorageError is
the exception: it signals that the medium failed and is left for the
front end to deal with.
"""

from typing import Optional


class TaskError(Exception):
    """Base class for recoverable, user-visible command failures."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class MalformedCommand(TaskError):
    """Raised when a command line violates the grammar."""

    def __init__(self, reason: str, token: Optional[str] = None):
        self.token = token
        super().__init__(reason)


class InvalidInterval(MalformedCommand):
    """Raised when a recurrence interval is zero or negative."""

    def __init__(self, reason: str = "I can't travel back in time ... yet!"):
        super().__init__(reason)


class IndexOutOfRange(TaskError):
    """Raised when a task position does not address an existing task."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        if size == 0:
            reason = f"There's no task {index + 1}, the list is empty!"
        else:
            reason = f"There's no task {index + 1}, pick one from 1 to {size}!"
        super().__init__(reason)


class StorageError(Exception):
    """Raised when the task file cannot be read or written."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)
