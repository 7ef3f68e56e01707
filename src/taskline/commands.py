"""Typed commands produced by the parser and consumed by the executor."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

from .todo import Task


@dataclass(frozen=True)
class AddTodo:
    description: str

    def build(self) -> Task:
        return Task.todo(self.description)


@dataclass(frozen=True)
class AddDeadline:
    description: str
    due_at: datetime

    def build(self) -> Task:
        return Task.deadline(self.description, self.due_at)


@dataclass(frozen=True)
class AddEvent:
    description: str
    starts_at: datetime
    ends_at: datetime

    def build(self) -> Task:
        return Task.event(self.description, self.starts_at, self.ends_at)


@dataclass(frozen=True)
class AddRecurring:
    description: str
    anchor_at: datetime
    interval: timedelta

    def build(self) -> Task:
        return Task.recurring(self.description, self.anchor_at, self.interval)


@dataclass(frozen=True)
class ListTasks:
    pass


@dataclass(frozen=True)
class Mark:
    """Set the done state of the task at a zero-based ``index``."""
    index: int
    done: bool = True


@dataclass(frozen=True)
class Unmark:
    index: int

    @property
    def done(self) -> bool:
        return False


@dataclass(frozen=True)
class Delete:
    index: int


@dataclass(frozen=True)
class Find:
    keyword: str


@dataclass(frozen=True)
class Echo:
    message: str


AddCommand = Union[AddTodo, AddDeadline, AddEvent, AddRecurring]

Command = Union[
    AddTodo,
    AddDeadline,
    AddEvent,
    AddRecurring,
    ListTasks,
    Mark,
    Unmark,
    Delete,
    Find,
    Echo,
]

ADD_COMMANDS = (AddTodo, AddDeadline, AddEvent, AddRecurring)
MUTATING_COMMANDS = ADD_COMMANDS + (Mark, Unmark, Delete)
