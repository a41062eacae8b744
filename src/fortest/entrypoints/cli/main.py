"""FORTEST CLI entry point.

Defines the top-level ``fortest`` command (via Click-Extra) and registers the
subcommands:

- ``fortest run MODULE``: import a module that registers suites and tests,
  run the session and exit with its status.
- ``fortest config``: show the effective configuration.

Notes
- The CLI version is sourced from `fortest.__version__` and displayed
  automatically by Click-Extra (``--version``).
- Logging options only affect framework diagnostics; test progress is
  printed by the reporter regardless of ``-v``/``-q``.

Examples
    $ fortest --version
    $ fortest -v run tests_native.math_suite
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from fortest import __version__
from fortest.logging import config_console_handler, config_flight_recorder, log_startup

from .config_cmd import show_config
from .helpers.log_level_parser import parse_log_level
from .run import run as run_command

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


def console_level(verbose_count: int, quiet_count: int) -> int:
    """WARNING moved one level per -v (down) or -q (up), clamped to DEBUG..CRITICAL."""
    level = logging.WARNING - 10 * (verbose_count - quiet_count)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def install_handlers(
    level: int,
    *,
    debug: bool,
    color: bool,
    recorder_path: Path | None,
    recorder_capacity: int,
    recorder_flush_on_close: bool,
) -> list[Handler]:
    """Replace the root handlers; the root logger passes everything through."""
    handlers: list[Handler] = [config_console_handler(level=level, debug_mode=debug, color=color)]
    if recorder_path is not None:
        handlers.append(
            config_flight_recorder(
                path=recorder_path,
                capacity=recorder_capacity,
                flush_on_close=recorder_flush_on_close,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    return handlers


HELP = """FORTEST command-line interface.

    FORTEST runs unit tests registered through its flat boundary: suites,
    tests, parameterized tests and test/suite/session fixtures, with
    tolerance-aware assertions and optional persistence of results.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (adds file/line details to console log records).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file written by the flight recorder.",
    default=Path(user_log_dir("fortest", appauthor=False, ensure_exists=True)) / "latest.log",
    envvar="FORTEST_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="FORTEST_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG granularity (unaffected by -v/-q) "
        "and write them to --log-path when a WARNING/ERROR occurs, or on clean "
        "exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit even without warnings.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L fortest.domain=DEBUG) or via FORTEST_LOGGER_LEVEL (comma/space list)."
    ),
    default=("sqlalchemy=WARNING",),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def fortest(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """FORTEST command-line interface."""
    level = console_level(verbose_count, quiet_count)
    handlers = install_handlers(
        level,
        debug=debug,
        color=ctx.color is not False,
        recorder_path=log_path if flight_recorder else None,
        recorder_capacity=flight_recorder_capacity,
        recorder_flush_on_close=force_flush_flight_recorder,
    )

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


fortest.add_command(run_command)
fortest.add_command(show_config)
