"""Task data model for taskline."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .utils.datetime import (
    ensure_naive,
    format_display,
    format_interval,
    now_local,
    to_iso_string,
)


DONE_ICON = "✓"
PENDING_ICON = " "


class TaskKind(Enum):
    """Task variants, carrying their display tag and command keyword."""
    TODO = ("T", "todo")
    DEADLINE = ("D", "deadline")
    EVENT = ("E", "event")
    RECURRING = ("R", "recurring")

    def __init__(self, tag: str, keyword: str):
        self.tag = tag
        self.keyword = keyword


# Fields each kind must carry; anything else must be left unset.
REQUIRED_FIELDS = {
    TaskKind.TODO: (),
    TaskKind.DEADLINE: ("due_at",),
    TaskKind.EVENT: ("starts_at", "ends_at"),
    TaskKind.RECURRING: ("anchor_at", "interval"),
}

SCHEDULE_FIELDS = ("due_at", "starts_at", "ends_at", "anchor_at", "interval")


@dataclass
class Task:
    """A single tracked task.

    One dataclass covers every variant; ``kind`` decides which scheduling
    fields are meaningful. ``display`` and ``to_command_string`` are the
    only places that branch on it.
    """

    kind: TaskKind
    description: str
    done: bool = False

    # Scheduling, by kind
    due_at: Optional[datetime] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    anchor_at: Optional[datetime] = None
    interval: Optional[timedelta] = None

    def __post_init__(self):
        """Normalize datetimes and check the fields match the kind."""
        self.due_at = ensure_naive(self.due_at)
        self.starts_at = ensure_naive(self.starts_at)
        self.ends_at = ensure_naive(self.ends_at)
        self.anchor_at = ensure_naive(self.anchor_at)

        required = REQUIRED_FIELDS[self.kind]
        for name in SCHEDULE_FIELDS:
            value = getattr(self, name)
            if name in required and value is None:
                raise ValueError(f"{self.kind.keyword} task needs '{name}'")
            if name not in required and value is not None:
                raise ValueError(f"{self.kind.keyword} task can't have '{name}'")

    @classmethod
    def todo(cls, description: str) -> "Task":
        return cls(TaskKind.TODO, description)

    @classmethod
    def deadline(cls, description: str, due_at: datetime) -> "Task":
        return cls(TaskKind.DEADLINE, description, due_at=due_at)

    @classmethod
    def event(cls, description: str, starts_at: datetime, ends_at: datetime) -> "Task":
        return cls(TaskKind.EVENT, description, starts_at=starts_at, ends_at=ends_at)

    @classmethod
    def recurring(cls, description: str, anchor_at: datetime, interval: timedelta) -> "Task":
        return cls(TaskKind.RECURRING, description, anchor_at=anchor_at, interval=interval)

    def set_done(self, done: bool) -> None:
        """Set the completion state."""
        self.done = done

    @property
    def status_icon(self) -> str:
        return DONE_ICON if self.done else PENDING_ICON

    def display(self, date_format: Optional[str] = None,
                time_format: Optional[str] = None) -> str:
        """Render the task for humans, e.g. ``[D][ ] submit report by Dec 1, 2024, 10:00 AM``."""
        def fmt(dt: datetime) -> str:
            return format_display(dt, date_format, time_format)

        text = f"[{self.kind.tag}][{self.status_icon}] {self.description}"

        if self.kind is TaskKind.DEADLINE:
            text += f" by {fmt(self.due_at)}"
        elif self.kind is TaskKind.EVENT:
            text += f" ({fmt(self.starts_at)} – {fmt(self.ends_at)})"
        elif self.kind is TaskKind.RECURRING:
            text += f" (from {fmt(self.anchor_at)} every {format_interval(self.interval)})"

        return text

    def to_command_string(self, position: int = 1) -> str:
        """Render the task as the command(s) that recreate it.

        A done task gets a second line, ``mark <position>``, where
        ``position`` is the 1-based slot the task lands in on replay.
        """
        command = f"{self.kind.keyword} {self.description}"

        if self.kind is TaskKind.DEADLINE:
            command += f" /by {to_iso_string(self.due_at)}"
        elif self.kind is TaskKind.EVENT:
            command += f" /from {to_iso_string(self.starts_at)} /to {to_iso_string(self.ends_at)}"
        elif self.kind is TaskKind.RECURRING:
            command += f" /on {to_iso_string(self.anchor_at)} /every {format_interval(self.interval)}"

        if self.done:
            command += f"\nmark {position}"

        return command

    def next_occurrence(self, after: Optional[datetime] = None) -> Optional[datetime]:
        """Return the first occurrence strictly after ``after``.

        ``after`` defaults to now. Only recurring tasks recur; other kinds
        return None.
        """
        if self.kind is not TaskKind.RECURRING:
            return None

        if after is None:
            after = now_local()

        if after < self.anchor_at:
            return self.anchor_at

        elapsed = after - self.anchor_at
        steps = elapsed // self.interval + 1
        return self.anchor_at + steps * self.interval

    def __str__(self) -> str:
        return self.display()
