"""Ordered, index-addressed task collection."""

from typing import Iterator, List, Tuple

from .exceptions import IndexOutOfRange
from .todo import Task


class TaskList:
    """Tasks in insertion order.

    Indices are zero-based here; user-facing positions are one-based and
    converted by the parser.
    """

    def __init__(self, tasks=None):
        self._tasks: List[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._tasks):
            raise IndexOutOfRange(index, len(self._tasks))

    def get(self, index: int) -> Task:
        self._check(index)
        return self._tasks[index]

    def add(self, task: Task) -> int:
        """Append ``task`` and return the new size."""
        self._tasks.append(task)
        return len(self._tasks)

    def remove(self, index: int) -> Task:
        """Remove and return the task at ``index``; later tasks shift down."""
        self._check(index)
        return self._tasks.pop(index)

    def set_done(self, index: int, done: bool) -> Task:
        task = self.get(index)
        task.set_done(done)
        return task

    def find(self, keyword: str) -> List[Tuple[int, Task]]:
        """Return ``(position, task)`` pairs whose description contains ``keyword``.

        Matching is case-sensitive and positions are one-based.
        """
        return [
            (position, task)
            for position, task in enumerate(self._tasks, start=1)
            if keyword in task.description
        ]

    def to_command_lines(self) -> List[str]:
        """Serialize every task to the command lines that rebuild the list."""
        lines = []
        for position, task in enumerate(self._tasks, start=1):
            lines.extend(task.to_command_string(position).split("\n"))
        return lines
