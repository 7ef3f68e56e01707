"""Wires parser, executor, storage and UI into a command session."""

import logging
from dataclasses import replace
from typing import List, Optional

from .commands import ADD_COMMANDS, Mark, Unmark
from .config import ConfigModel
from .exceptions import IndexOutOfRange, TaskError
from .executor import CommandExecutor, CommandResult
from .parser import CommandParser
from .storage import Storage
from .tasklist import TaskList
from .todo import TaskKind
from .ui import Ui


logger = logging.getLogger(__name__)

ADD_KEYWORDS = {kind.keyword for kind in TaskKind}


class Session:
    """One user's running session.

    ``handle`` is the per-command error boundary: every TaskError is turned
    into a failed CommandResult and reported, and the session carries on.
    StorageError is not a TaskError and propagates to the caller.
    """

    def __init__(self, storage: Optional[Storage] = None, ui: Optional[Ui] = None,
                 parser: Optional[CommandParser] = None, config: Optional[ConfigModel] = None):
        self.config = config or ConfigModel()
        self.storage = storage
        self.ui = ui or Ui(no_color=self.config.no_color, use_emoji=self.config.use_emoji)
        self.parser = parser or CommandParser()
        self.tasks = TaskList()
        self.executor = CommandExecutor(
            self.tasks,
            storage=storage,
            date_format=self.config.date_format,
            time_format=self.config.time_format,
        )

    def load(self) -> int:
        """Replay the stored command log into the task list.

        Lines that no longer parse or apply are skipped with a warning.
        ``mark``/``unmark`` lines refer to stored positions, so they are
        rebased past any skipped task lines. Returns the number of tasks
        loaded.
        """
        if self.storage is None:
            return 0

        lines = self.storage.read_all()
        # Stored position (0-based) -> index in self.tasks, None if skipped
        slots: List[Optional[int]] = []

        self.executor.autosave = False
        try:
            for number, line in enumerate(lines, start=1):
                try:
                    command = self.parser.parse(line)
                    if isinstance(command, (Mark, Unmark)):
                        command = self._rebase(command, slots)
                    self.executor.execute(command)
                except TaskError as e:
                    if line.split(maxsplit=1)[0].lower() in ADD_KEYWORDS:
                        slots.append(None)
                    logger.warning(f"Skipping line {number} of {self.storage.path}: {e.reason}")
                    continue

                if isinstance(command, ADD_COMMANDS):
                    slots.append(len(self.tasks) - 1)
        finally:
            self.executor.autosave = True

        logger.info(f"Loaded {len(self.tasks)} tasks from {self.storage.path}")
        return len(self.tasks)

    @staticmethod
    def _rebase(command, slots: List[Optional[int]]):
        if not 0 <= command.index < len(slots):
            raise IndexOutOfRange(command.index, len(slots))
        index = slots[command.index]
        if index is None:
            raise TaskError(f"Task {command.index + 1} was skipped")
        return replace(command, index=index)

    def execute(self, line: str) -> CommandResult:
        """Parse and apply ``line`` without rendering anything."""
        try:
            command = self.parser.parse(line)
            return self.executor.execute(command)
        except TaskError as e:
            logger.debug(f"Command failed: {type(e).__name__}: {e.reason}")
            return CommandResult(e.reason, error=e)

    def handle(self, line: str) -> CommandResult:
        """Execute ``line`` and render the response."""
        result = self.execute(line)
        if result.ok:
            self.ui.set_next_output(result.message)
        else:
            self.ui.show_error(result.error)
        self.ui.render()
        return result
