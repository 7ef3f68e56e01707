"""Command-line interface for taskline."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.text import Text

from .config import get_config, load_config
from .exceptions import StorageError
from .session import Session
from .storage import Storage
from .ui import Ui


console = Console(stderr=True)

EXIT_WORDS = {"bye", "exit", "quit"}


def configure_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_session(data_file=None) -> Session:
    """Build a Session from the loaded configuration and replay stored tasks."""
    config = get_config()
    path = Path(data_file) if data_file else config.get_tasks_path()
    ui = Ui(no_color=config.no_color, use_emoji=config.use_emoji)
    session = Session(storage=Storage(path), ui=ui, config=config)
    session.load()
    return session


@click.group(invoke_without_command=True)
@click.option("--config", type=click.Path(), help="Path to config file")
@click.option("--data-file", type=click.Path(), help="Path to the task file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, data_file, verbose):
    """taskline - keep track of todos, deadlines, events and recurring tasks."""
    ctx.ensure_object(dict)

    cfg = load_config(Path(config)) if config else get_config()
    configure_logging(cfg.log_level, verbose)

    try:
        ctx.obj["session"] = build_session(data_file)
    except StorageError as e:
        console.print(Text(f"Error: {e}", style="red"))
        sys.exit(1)

    # If no command provided, start the interactive shell
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.pass_context
def shell(ctx):
    """Read commands interactively until 'bye'."""
    session: Session = ctx.obj["session"]
    session.ui.greet()

    while True:
        try:
            line = click.prompt("", default="", show_default=False, prompt_suffix="> ")
        except (EOFError, click.Abort):
            break

        if not line.strip():
            continue
        if line.strip().lower() in EXIT_WORDS:
            break

        try:
            session.handle(line)
        except StorageError as e:
            console.print(Text(f"Error: {e}", style="red"))
            sys.exit(1)

    session.ui.farewell()


@main.command()
@click.argument("commands", nargs=-1, required=True)
@click.pass_context
def run(ctx, commands):
    """Run one or more commands, e.g. taskline run "todo read book" "list"."""
    session: Session = ctx.obj["session"]
    failed = False

    for line in commands:
        try:
            result = session.handle(line)
        except StorageError as e:
            console.print(Text(f"Error: {e}", style="red"))
            sys.exit(1)
        failed = failed or not result.ok

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
