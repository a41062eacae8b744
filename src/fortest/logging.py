"""Diagnostic logging for FORTEST.

Test outcomes never go through here; they are printed by a
:class:`fortest.interfaces.reporter.Reporter`. Logging describes what the
framework itself does: registrations, fixture forwarding, runs, persistence
and fatal boundary errors.

Two handlers are provided for the CLI:

- a Rich console handler on stderr, honoring ``-v``/``-q`` and ``--debug``;
- a "flight recorder": a :class:`~logging.handlers.MemoryHandler` keeping the
  most recent records at DEBUG granularity and writing them to a file once a
  WARNING (or worse) is seen, so the lead-up to a problem is on disk even when
  the console was quiet.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

from fortest import config

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_LOGGER = "fortest"  # pragma: no mutate

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s "
    "%(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


def is_project_logger(name: str) -> bool:
    """True for ``fortest`` and its child loggers."""
    return name == PROJECT_LOGGER or name.startswith(PROJECT_LOGGER + ".")


class LibraryPrefixFilter(logging.Filter):
    """Tag records from other libraries with ``[toplevel]`` (e.g. ``[sqlalchemy]``).

    Sets ``record.prefix``, which the console format expects; FORTEST's own
    records get an empty prefix. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if is_project_logger(record.name):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.partition('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Console threshold. Forced to DEBUG in debug mode.
        debug_mode: Show timestamps, logger names and source locations.
        color: False disables colors (mirrors click-extra's ``--no-color``).

    Returns:
        RichHandler: Handler to attach to the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None

    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(LibraryPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the flight recorder writing to ``path``.

    The file is opened lazily, on the first flush, so a clean run leaves the
    previous log in place unless ``flush_on_close`` is set.

    Args:
        path: Log file; its parent directory is created if needed.
        capacity: Records kept in memory before an automatic flush.
        flush_level: Records at or above this level flush the buffer.
        flush_on_close: Also flush whatever is buffered at shutdown.

    Returns:
        MemoryHandler: Buffering handler whose target is a FileHandler.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def flush_all() -> None:
    """Flush every root handler (and the flight recorder's buffer with it).

    Needed before ``os._exit``, which skips :func:`logging.shutdown`.
    """
    for handler in logging.getLogger().handlers:
        handler.flush()


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line INFO summary followed by DEBUG diagnostics.

    The diagnostics end up in the flight recorder, so a log file attached to a
    bug report says which interpreter, platform and settings produced it.
    """
    logger.info(
        "FORTEST %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s, CWD: %s", os.getpid(), Path.cwd())
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    logger.debug(
        "Environment: %s=%s, %s=%s",
        config.VERBOSITY_ENV,
        config.get_verbosity(),
        config.DB_URL_ENV,
        "set" if config.get_optional_db_url() else "unset",
    )
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path if log_path else "<none>",
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()} or "<none>",
    )
