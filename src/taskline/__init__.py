"""taskline - a task tracker driven by one-line text commands."""

__version__ = "0.1.0"

from .todo import Task, TaskKind
from .parser import CommandParser, parse_command
from .tasklist import TaskList
from .executor import CommandExecutor, CommandResult
from .exceptions import (
    TaskError,
    MalformedCommand,
    InvalidInterval,
    IndexOutOfRange,
    StorageError,
)

__all__ = [
    "Task",
    "TaskKind",
    "CommandParser",
    "parse_command",
    "TaskList",
    "CommandExecutor",
    "CommandResult",
    "TaskError",
    "MalformedCommand",
    "InvalidInterval",
    "IndexOutOfRange",
    "StorageError",
    "__version__",
]
