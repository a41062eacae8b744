"""``-L NAME=LEVEL`` option for per-logger thresholds.

Pairs come from repeated flags or from one ``FORTEST_LOGGER_LEVEL`` string
separated by commas and/or blanks. LEVEL is a level name (any case) or a
number, e.g. ``fortest.adapters=debug`` or ``sqlalchemy.engine=20``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING}

LEVEL_NAMES = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}

SEPARATORS = re.compile(r"[,\s]+")


def to_level(text: str) -> int:
    """Numeric level for a level name or a non-negative number.

    Raises:
        click.BadParameter: For anything else.
    """
    text = text.strip()
    if text.isdigit():
        return int(text)
    try:
        return LEVEL_NAMES[text.upper()]
    except KeyError:
        raise click.BadParameter(f"Invalid log level: {text}") from None


def split_pair(item: str) -> tuple[str, int]:
    """``"name=LEVEL"`` -> ``("name", level)``."""
    name, sep, level = item.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
    return name.strip(), to_level(level)


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | Iterable[str],
) -> dict[str, int]:
    """Click callback: DEFAULT_LIB_LEVELS updated with the given pairs, last one wins."""
    chunks = [value] if isinstance(value, str) else list(value)
    levels = dict(DEFAULT_LIB_LEVELS)
    levels.update(
        split_pair(item) for chunk in chunks for item in SEPARATORS.split(chunk) if item
    )
    return levels
