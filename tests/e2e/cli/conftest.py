"""Fixtures for end-to-end CLI tests.

Provides a test-only `log-demo` command emitting representative log records,
a CliRunner, an isolated filesystem, and a writer for throwaway test modules
consumed by `fortest run`.
"""

from __future__ import annotations

import logging
import textwrap
from collections.abc import Callable
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from fortest.entrypoints.cli.main import fortest

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit DEBUG..CRITICAL on 'fortest.demo' and a few third-party records."""
    logger = logging.getLogger("fortest.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and any section registry it keeps."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register 'log-demo' on the `fortest` group for one test."""
    fortest.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(fortest, "log-demo")


@pytest.fixture
def runner() -> CliRunner:
    """Click runner for invoking the CLI."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def write_module(tmp_path: Path) -> Callable[[str, str], str]:
    """Write a test module registering through the bridge; return its path."""

    def write(name: str, source: str) -> str:
        path = tmp_path / f"{name}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return str(path)

    return write
