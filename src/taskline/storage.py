"""Plain-text storage for the task command log.

The file holds one command per line, exactly as a user would type it.
This module only moves lines to and from disk; the line format belongs
to the task model.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from .exceptions import StorageError


logger = logging.getLogger(__name__)


class Storage:
    """File-backed store for command lines."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def read_all(self) -> List[str]:
        """Return every non-empty stored line, or an empty list if there is no file yet."""
        if not self.path.exists():
            logger.debug(f"No task file at {self.path}")
            return []

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise StorageError(f"Couldn't read tasks from {self.path}: {e}", self.path) from e

        # Only "\n" ends a command; other line separators belong to the text
        lines = [line.strip() for line in text.split("\n")]
        return [line for line in lines if line]

    def write_all(self, lines: Iterable[str]) -> None:
        """Overwrite the file with ``lines``."""
        lines = list(lines)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StorageError(f"Couldn't save tasks to {self.path}: {e}", self.path) from e

        logger.debug(f"Wrote {len(lines)} lines to {self.path}")
