"""Command-line entry point for the dashboard.

`worksuite` with no subcommand starts the interactive dashboard. The
terminal is switched to cbreak mode and (by default) to the alternate
screen; both are restored on every way out, including fatal errors.
"""
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click

from app import App, AppState
from events import InputSurfaceError
from menu import Screen
from models import DOING, DONE, TODO, Task
from render import frame_lines
from settings import Settings
from storage import Storage, StoreError
from terminal import TerminalKeySource, enter_screen, leave_screen
from view import build_layout

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Optional[Path], verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=str(log_file), level=level, format=LOG_FORMAT)
    else:
        # the dashboard owns the terminal; only problems go to stderr
        logging.basicConfig(level=max(level, logging.WARNING), format="%(levelname)s %(message)s")


def sample_tasks() -> list:
    now = datetime.now(timezone.utc).replace(microsecond=0)
    rows = [
        (1, "Write weekly report", "Summarise progress for the team", "work", TODO),
        (2, "Book dentist", "Morning slot if possible", "personal", TODO),
        (3, "Refactor board cursors", "Keep one focused column", "code", DOING),
        (4, "Renew passport", "Photos are already done", "personal", DONE),
    ]
    return [Task(id=i, title=t, description=d, category=c, status=s, created_at=now)
            for i, t, d, c, s in rows]


def dashboard_options(func):
    """Options of the interactive dashboard, accepted before or after `run`."""
    func = click.option('--no-alt-screen', is_flag=True,
                        help='Draw on the normal screen buffer.')(func)
    func = click.option('--keep-going', is_flag=True,
                        help='Show store errors as a banner instead of exiting.')(func)
    func = click.option('--tick-rate', type=click.IntRange(min=1), default=None,
                        help='Redraw interval in milliseconds (default: WORKSUITE_TICK_MS or 200).')(func)
    return func


def apply_dashboard_options(settings: Settings, tick_rate: Optional[int],
                            keep_going: bool, no_alt_screen: bool) -> None:
    if tick_rate is not None:
        settings.tick_ms = tick_rate
    settings.keep_going = settings.keep_going or keep_going
    settings.alt_screen = settings.alt_screen and not no_alt_screen


@click.group(invoke_without_command=True)
@click.option('--db', 'db_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Task store file (default: WORKSUITE_DB or ./data/db.json).')
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Write log records to this file (default: WORKSUITE_LOG_FILE).')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging.')
@dashboard_options
@click.pass_context
def main(ctx: click.Context, db_path: Optional[Path], log_file: Optional[Path], verbose: bool,
         tick_rate: Optional[int], keep_going: bool, no_alt_screen: bool) -> None:
    """Personal Work Suite: a terminal kanban dashboard."""
    try:
        settings = Settings.load()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    if db_path is not None:
        settings.db_path = db_path
    if log_file is not None:
        settings.log_file = log_file
    apply_dashboard_options(settings, tick_rate, keep_going, no_alt_screen)
    configure_logging(settings.log_file, verbose)
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
@dashboard_options
@click.pass_obj
def run(settings: Settings, tick_rate: Optional[int], keep_going: bool, no_alt_screen: bool) -> None:
    """Start the interactive dashboard (the default command)."""
    apply_dashboard_options(settings, tick_rate, keep_going, no_alt_screen)
    store = Storage(settings.db_path)
    out = sys.stdout
    error: Optional[Exception] = None
    interrupted = False
    try:
        source = TerminalKeySource(sys.stdin)
        source.enter_raw_mode()
    except InputSurfaceError as exc:
        raise click.ClickException(str(exc)) from exc
    logger.info("dashboard started on %s (tick %d ms)", store.path, settings.tick_ms)
    enter_screen(out, settings.alt_screen)
    try:
        App(store, source, out, settings.tick_rate, settings.keep_going).run()
    except (StoreError, InputSurfaceError) as exc:
        error = exc
    except KeyboardInterrupt:
        interrupted = True
    finally:
        leave_screen(out, settings.alt_screen)
        source.restore_mode()
    if error is not None:
        logger.error("dashboard stopped: %s", error)
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    if interrupted:
        click.echo("Interrupted. Goodbye.")
        sys.exit(130)
    click.echo("Goodbye.")


@main.command()
@click.pass_obj
def show(settings: Settings) -> None:
    """Print the board once and exit."""
    store = Storage(settings.db_path)
    try:
        columns = store.snapshot()
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    state = AppState(screen=Screen.TODOS)
    for line in frame_lines(build_layout(state, columns)):
        click.echo(line)


@main.command()
@click.option('--force', is_flag=True, help='Overwrite an existing store file.')
@click.pass_obj
def seed(settings: Settings, force: bool) -> None:
    """Write a small sample task store."""
    store = Storage(settings.db_path)
    if store.path.exists() and not force:
        raise click.ClickException(f"{store.path} already exists (use --force to overwrite)")
    tasks = sample_tasks()
    store.save_tasks(tasks)
    click.echo(f"Wrote {len(tasks)} tasks to {store.path}")


if __name__ == '__main__':  # pragma: no cover
    main()
