"""Applies parsed commands to a task list."""

import logging
from dataclasses import dataclass
from typing import Optional

from .commands import (
    ADD_COMMANDS,
    MUTATING_COMMANDS,
    Command,
    Delete,
    Echo,
    Find,
    ListTasks,
    Mark,
    Unmark,
)
from .exceptions import TaskError
from .tasklist import TaskList


logger = logging.getLogger(__name__)


EMPTY_LIST = "Your list is empty! Add something with 'todo', 'deadline', 'event' or 'recurring'."
NO_MATCHES = "No tasks match '{keyword}'."


@dataclass
class CommandResult:
    """Outcome of one command line.

    ``error`` is set instead of raising so callers can branch on the
    error kind; ``message`` is what the user sees either way.
    """
    message: str
    mutated: bool = False
    error: Optional[TaskError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _count(size: int) -> str:
    return f"Now you have {size} task{'' if size == 1 else 's'} in the list."


class CommandExecutor:
    """Executes commands against a TaskList.

    After every mutating command the whole list is handed to ``storage``
    (when one is attached and ``autosave`` is on). Validation always runs
    before mutation, so a failed command leaves the list untouched.
    """

    def __init__(self, tasks: TaskList, storage=None, date_format: Optional[str] = None,
                 time_format: Optional[str] = None):
        self.tasks = tasks
        self.storage = storage
        self.date_format = date_format
        self.time_format = time_format
        self.autosave = True

    def _display(self, task) -> str:
        return task.display(self.date_format, self.time_format)

    def execute(self, command: Command) -> CommandResult:
        """Apply ``command``.

        Raises:
            IndexOutOfRange: if a mark/unmark/delete index is out of range.
        """
        if isinstance(command, ADD_COMMANDS):
            message = self._add(command)
        elif isinstance(command, ListTasks):
            message = self._list()
        elif isinstance(command, (Mark, Unmark)):
            message = self._mark(command.index, command.done)
        elif isinstance(command, Delete):
            message = self._delete(command.index)
        elif isinstance(command, Find):
            message = self._find(command.keyword)
        elif isinstance(command, Echo):
            message = command.message
        else:
            raise TypeError(f"Unknown command: {command!r}")

        mutated = isinstance(command, MUTATING_COMMANDS)
        if mutated:
            self.save()
        return CommandResult(message, mutated=mutated)

    def save(self) -> None:
        """Write the full list through to storage."""
        if self.storage is None or not self.autosave:
            return
        lines = self.tasks.to_command_lines()
        self.storage.write_all(lines)
        logger.debug(f"Saved {len(self.tasks)} tasks ({len(lines)} lines)")

    def _add(self, command) -> str:
        task = command.build()
        size = self.tasks.add(task)
        logger.info(f"Added {task.kind.keyword} task '{task.description}'")
        return f"Got it. I've added this task:\n  {self._display(task)}\n{_count(size)}"

    def _list(self) -> str:
        if not len(self.tasks):
            return EMPTY_LIST
        lines = ["Here are the tasks in your list:"]
        lines.extend(
            f"{position}. {self._display(task)}"
            for position, task in enumerate(self.tasks, start=1)
        )
        return "\n".join(lines)

    def _mark(self, index: int, done: bool) -> str:
        task = self.tasks.set_done(index, done)
        if done:
            return f"Nice! I've marked this task as done:\n  {self._display(task)}"
        return f"OK, I've marked this task as not done yet:\n  {self._display(task)}"

    def _delete(self, index: int) -> str:
        task = self.tasks.remove(index)
        logger.info(f"Deleted task {index + 1} '{task.description}'")
        return f"Noted. I've removed this task:\n  {self._display(task)}\n{_count(len(self.tasks))}"

    def _find(self, keyword: str) -> str:
        matches = self.tasks.find(keyword)
        if not matches:
            return NO_MATCHES.format(keyword=keyword)
        lines = ["Here are the matching tasks in your list:"]
        lines.extend(f"{position}. {self._display(task)}" for position, task in matches)
        return "\n".join(lines)
