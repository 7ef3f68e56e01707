"""Console rendering for taskline."""

from typing import List, Optional

from rich.console import Console
from rich.text import Text

from .exceptions import TaskError
from .todo import DONE_ICON


GREETING = "Hello! I'm taskline.\nWhat can I do for you?"
FAREWELL = "Bye. Hope to see you again soon!"


class Ui:
    """Buffers response text and prints it with rich.

    Task text is printed as plain ``Text`` so brackets such as ``[T]`` are
    never read as console markup.
    """

    def __init__(self, console: Optional[Console] = None, no_color: bool = False,
                 use_emoji: bool = True):
        self.console = console or Console(no_color=no_color, highlight=False)
        self.use_emoji = use_emoji
        self._pending: List[Text] = []

    def set_next_output(self, text: str) -> None:
        """Queue ``text`` for the next render."""
        styled = Text(text)
        styled.highlight_regex(rf"(?<=\[){DONE_ICON}(?=\])", "bold green")
        self._pending.append(styled)

    def show_error(self, error: TaskError) -> None:
        prefix = "😿 " if self.use_emoji else ""
        self._pending.append(Text(f"{prefix}{error.reason}", style="red"))

    def render(self) -> None:
        """Print and clear everything queued since the last render."""
        for text in self._pending:
            self.console.print(text)
        self._pending = []

    def greet(self) -> None:
        self.set_next_output(GREETING)
        self.render()

    def farewell(self) -> None:
        self.set_next_output(FAREWELL)
        self.render()
