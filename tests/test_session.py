"""End-to-end tests for Session: parsing, execution, persistence and replay."""

from datetime import datetime, timedelta

import pytest

from taskline.exceptions import IndexOutOfRange, InvalidInterval, MalformedCommand
from taskline.session import Session
from taskline.storage import Storage
from taskline.todo import Task
from taskline.utils.datetime import format_display

from conftest import MemoryStorage, make_ui


DUE = datetime(2024, 12, 1, 10, 0)

ALL_KINDS = [
    Task.todo("read book"),
    Task.deadline("submit report", DUE),
    Task.event("meetup", DUE, DUE + timedelta(hours=2)),
    Task.recurring("water plants", DUE, timedelta(days=3)),
    Task.recurring("backup", DUE.replace(second=15), timedelta(seconds=90)),
    Task.recurring("review goals", DUE, timedelta(weeks=2)),
]


def replay(lines):
    session = Session(storage=MemoryStorage(lines), ui=make_ui())
    session.load()
    return session


class TestRoundTrip:
    """A task written to the command log comes back identical."""

    @pytest.mark.parametrize("done", [False, True])
    @pytest.mark.parametrize("task", ALL_KINDS, ids=lambda task: task.description)
    def test_single_task(self, task, done):
        task.set_done(done)

        session = replay(task.to_command_string().split("\n"))

        assert len(session.tasks) == 1
        assert session.tasks.get(0) == task

    def test_whole_list(self, session):
        for line in ["todo a", "deadline b /by 2024-12-01T10:00", "event c /from 2024-12-01T10:00 /to 2024-12-02T10:00",
                     "recurring d /on 2024-12-01T10:00 /every 2 days", "mark 2", "mark 4"]:
            assert session.handle(line).ok

        reloaded = replay(session.storage.lines)

        assert list(reloaded.tasks) == list(session.tasks)
        assert [task.done for task in reloaded.tasks] == [False, True, False, True]


class TestSession:

    def test_end_to_end_scenario(self, session):
        for line in ["todo read book", "deadline submit report /by 2024-12-01T10:00", "mark 1"]:
            session.handle(line)

        result = session.handle("list")

        assert result.message.splitlines()[1:] == [
            "1. [T][✓] read book",
            f"2. [D][ ] submit report by {format_display(DUE)}",
        ]

    def test_output_is_rendered(self, session):
        session.handle("echo hello")
        assert "hello" in session.ui.console.file.getvalue()

    @pytest.mark.parametrize("line, error_type", [
        ("deadline buy milk", MalformedCommand),
        ("mark abc", MalformedCommand),
        ("recurring water plants /on tomorrow /every -1 days", InvalidInterval),
        ("mark 1", IndexOutOfRange),
        ("delete 0", IndexOutOfRange),
        ("fly me to the moon", MalformedCommand),
    ])
    def test_errors_are_reported_not_raised(self, session, line, error_type):
        result = session.handle(line)

        assert not result.ok
        assert isinstance(result.error, error_type)
        assert result.message == result.error.reason
        assert result.error.reason in session.ui.console.file.getvalue()

    def test_huge_interval_is_reported(self, session):
        result = session.execute("recurring x /on 2024-01-01T10:00 /every 99999999999 years")

        assert not result.ok
        assert isinstance(result.error, MalformedCommand)
        assert not isinstance(result.error, InvalidInterval)

    @pytest.mark.parametrize("line", ["todo a\nb", "todo a\u2028b", "todo a\nmark 1"])
    def test_multi_line_input_stores_nothing(self, session, line):
        result = session.handle(line)

        assert isinstance(result.error, MalformedCommand)
        assert len(session.tasks) == 0
        assert session.storage.lines == []
        assert len(replay(session.storage.lines).tasks) == 0

    def test_session_continues_after_error(self, session):
        session.handle("todo read book")
        session.handle("unmark 5")
        result = session.handle("mark 1")

        assert result.ok
        assert session.tasks.get(0).done

    @pytest.mark.parametrize("line", ["mark 0", "unmark 3", "delete 3"])
    def test_bounds_leave_list_unchanged(self, session, line):
        session.handle("todo a")
        session.handle("todo b")
        before = list(session.storage.lines)

        result = session.handle(line)

        assert isinstance(result.error, IndexOutOfRange)
        assert len(session.tasks) == 2
        assert session.storage.lines == before

    def test_delete_rebases_indices(self, session):
        for description in ["a", "b", "c"]:
            session.handle(f"todo {description}")

        session.handle("delete 1")
        session.handle("mark 2")

        assert [(task.description, task.done) for task in session.tasks] == [("b", False), ("c", True)]

    def test_find_is_non_destructive(self, session):
        session.handle("todo read book")
        session.handle("todo buy milk")
        session.handle("mark 2")
        writes = session.storage.writes

        session.handle("find book")

        assert [(task.description, task.done) for task in session.tasks] == [
            ("read book", False), ("buy milk", True),
        ]
        assert session.storage.writes == writes


class TestLoad:

    def test_load_does_not_rewrite(self):
        storage = MemoryStorage(["todo read book", "mark 1"])
        session = Session(storage=storage, ui=make_ui())

        assert session.load() == 1
        assert storage.writes == 0
        assert session.executor.autosave

    def test_corrupt_lines_skipped(self):
        session = replay(["todo read book", "deadline broken", "mark 7", "todo buy milk"])

        assert [task.description for task in session.tasks] == ["read book", "buy milk"]

    def test_marks_follow_stored_positions_past_skipped_lines(self):
        session = replay(["todo a", "deadline broken", "todo c", "mark 3"])

        assert [(task.description, task.done) for task in session.tasks] == [("a", False), ("c", True)]

    def test_mark_of_skipped_task_is_skipped(self):
        session = replay(["deadline broken", "mark 1", "todo b", "mark 2"])

        assert [(task.description, task.done) for task in session.tasks] == [("b", True)]

    def test_unmark_follows_stored_positions(self):
        session = replay(["event broken /from x", "todo b", "mark 2", "todo c", "mark 3", "unmark 2"])

        assert [(task.description, task.done) for task in session.tasks] == [("b", False), ("c", True)]

    def test_without_storage(self):
        assert Session(ui=make_ui()).load() == 0

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "data" / "tasks.txt"
        first = Session(storage=Storage(path), ui=make_ui())
        first.handle("todo read book")
        first.handle("event meetup /from 2024-12-01T10:00 /to 2024-12-01T12:00")
        first.handle("mark 2")

        second = Session(storage=Storage(path), ui=make_ui())
        second.load()

        assert [task.display() for task in second.tasks] == [task.display() for task in first.tasks]
        assert path.read_text(encoding="utf-8").splitlines() == [
            "todo read book",
            "event meetup /from 2024-12-01T10:00 /to 2024-12-01T12:00",
            "mark 2",
        ]

    def test_file_round_trip_after_multi_line_input(self, tmp_path):
        path = tmp_path / "tasks.txt"
        first = Session(storage=Storage(path), ui=make_ui())
        assert not first.handle("todo a\u2028b").ok
        assert not first.handle("todo c\nmark 1").ok
        first.handle("todo d")

        second = Session(storage=Storage(path), ui=make_ui())

        assert second.load() == 1
        assert second.tasks.get(0) == Task.todo("d")
        assert path.read_text(encoding="utf-8") == "todo d\n"
