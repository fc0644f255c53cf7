#!/usr/bin/env python3
"""bigclock CLI.

Make your terminal into a big clock.

Usage:
    bigclock                  # just the clock
    bigclock -m               # time bar for the current minute
    bigclock -o               # ... the current hour
    bigclock -d               # ... the current day
    bigclock -c 25m           # repeating 25 minute window
    bigclock -u 1h30m         # one-shot countdown with a notification
    bigclock -t               # time since start

Press q, Esc or Ctrl+C to quit.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .app import ClockApp
from .clock import Clock, ClockSetupError
from .config import load_config, load_dotenv_files
from .notify import Notifier
from .timebar import parse_duration, resolve_duration_kind

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class DurationType(click.ParamType):
    """Seconds, or a duration like 90s, 5m, 1h30m, 2d."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationType()


def verbosity_level(verbose: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(level: int, log_file: Path) -> logging.Logger:
    """Send the ``bigclock`` logger to ``log_file``; the screen belongs to the clock."""
    logger = logging.getLogger("bigclock")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        click.echo(f"Warning: cannot write log file {log_file}: {e}", err=True)
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-m", "--minute", is_flag=True, help="Time bar for the current minute.")
@click.option("-o", "--hour", is_flag=True, help="Time bar for the current hour.")
@click.option("-d", "--day", is_flag=True, help="Time bar for the current day.")
@click.option("-c", "--custom", type=DURATION, metavar="DURATION", help="Repeating time bar of DURATION (e.g. 90, 5m, 1h30m).")
@click.option("-u", "--countdown", type=DURATION, metavar="DURATION", help="One-shot time bar of DURATION; notifies when full.")
@click.option("-t", "--timer", is_flag=True, help="Show time since start.")
@click.option("-v", "--verbose", count=True, help="More log output (repeat for debug).")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors.")
@click.option("--notify/--no-notify", default=None, help="Desktop notification when a countdown finishes.")
@click.option("--sound/--no-sound", default=None, help="Play a sound when a countdown finishes.")
@click.option("--sound-file", type=click.Path(dir_okay=False, path_type=Path), help="Sound clip to play.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Where to write the log.")
@click.version_option(__version__, "-V", "--version", prog_name="bigclock")
def main(
    minute: bool,
    hour: bool,
    day: bool,
    custom: int | None,
    countdown: int | None,
    timer: bool,
    verbose: int,
    quiet: bool,
    notify: bool | None,
    sound: bool | None,
    sound_file: Path | None,
    log_file: Path | None,
) -> None:
    """Make your terminal into a big clock."""

    selected = [minute, hour, day, custom is not None, countdown is not None, timer]
    if sum(selected) > 1:
        raise click.UsageError("Only one of -m/--minute, -o/--hour, -d/--day, -c/--custom, -u/--countdown, -t/--timer may be given.")

    load_dotenv_files()
    try:
        config = load_config()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    config = config.with_overrides(notify=notify, sound=sound, sound_file=sound_file, log_file=log_file)

    logger = configure_logging(verbosity_level(verbose, quiet), config.log_file)

    kind = resolve_duration_kind(minute=minute, hour=hour, day=day, custom=custom, countup=countdown, timer=timer)
    logger.debug(f"time bar: {kind!r}, config: {config}")

    console = Console()
    clock = Clock(kind, notifier=Notifier(config, console))
    app = ClockApp(clock, config, console=console)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("interrupted")
    except ClockSetupError as e:
        logger.error(f"setup failed: {e}")
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":  # pragma: no cover
    main()
