"""``fortest config``: show the effective runtime configuration.

Prints the package version, the results database URL (password redacted)
and the default assertion verbosity, as resolved from the environment. With
a single selector flag only that value is printed, bare, so it can be used
in scripts.
"""

from __future__ import annotations

import click

from fortest import __version__, config
from fortest.domain.value_objects import Verbosity

from .helpers import sanitize_url, warn

UNSET = "(not set)"  # pragma: no mutate


def _db_url() -> str:
    url = config.get_optional_db_url()
    return sanitize_url(url) if url else UNSET


def _verbosity() -> str:
    raw = config.get_verbosity()
    try:
        return Verbosity.from_value(raw).name.lower()
    except ValueError:
        warn(f"Invalid {config.VERBOSITY_ENV}={raw!r}")
        return f"{raw} (invalid)"


@click.command(name="config")
@click.option("--all", "show_all", is_flag=True, help="Show every value (the default).")
@click.option("--version", "show_version", is_flag=True, help="Show only the version.")
@click.option("--db-url", "show_db_url", is_flag=True, help="Show only the results database URL.")
@click.option("--verbosity", "show_verbosity", is_flag=True, help="Show only the verbosity.")
def show_config(show_all: bool, show_version: bool, show_db_url: bool, show_verbosity: bool) -> None:
    """Show version and configuration."""
    selected = [
        ("version", show_version, lambda: __version__),
        ("db_url", show_db_url, _db_url),
        ("verbosity", show_verbosity, _verbosity),
    ]
    picked = [(key, getter) for key, flag, getter in selected if flag]

    if len(picked) == 1 and not show_all:
        click.echo(picked[0][1]())
        return

    rows = picked if picked and not show_all else [(key, getter) for key, _, getter in selected]
    for key, getter in rows:
        click.echo(f"{key:<10}: {getter()}")
