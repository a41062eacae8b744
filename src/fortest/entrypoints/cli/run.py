"""``fortest run``: run the tests registered by a Python module.

The target module registers its suites, fixtures and tests through
:mod:`fortest.entrypoints.bridge` when it is imported (or from a
``register()`` function it defines). The command installs a fresh
process-wide context first, so registrations land in a clean session, then
runs the session with a console reporter and prints one summary line per
suite.

Exit status
- 0: no test failed.
- 1: at least one test failed, or a test body raised (the run stops there).

Failure modes
- The module cannot be imported → ``ClickException``.
- A registration error during import (duplicate suite, bad scope, ...)
  terminates the process through the boundary (exit status 134).
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

import click

from fortest import config
from fortest.bootstrap import FortestContext, build_context, set_context
from fortest.domain.value_objects import Status, Verbosity

from .helpers import error, success, warn

logger = logging.getLogger(__name__)

REGISTER_HOOK = "register"  # pragma: no mutate

NOT_PERSISTED_MSG = "Results are not persisted (FORTEST_DB_URL is not set)."


def load_module(target: str) -> ModuleType:
    """Import ``target`` given as a dotted module name or a ``.py`` path.

    An already imported module is reloaded so its import-time registrations
    run against the current context.

    Raises:
        click.ClickException: If the module cannot be found or raises on import.
    """
    try:
        if target.endswith(".py"):
            path = Path(target).resolve()
            spec = importlib.util.spec_from_file_location(path.stem, path)
            if spec is None or spec.loader is None:
                raise ImportError(f"Cannot load {target}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            return module
        if target in sys.modules:
            return importlib.reload(sys.modules[target])
        return importlib.import_module(target)
    except Exception as e:  # pylint: disable=broad-except
        logger.debug("Import of %s failed", target, exc_info=True)
        raise click.ClickException(f"Cannot import test module {target!r}: {e}") from e


def parse_verbosity(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str,
) -> Verbosity:
    """Click callback accepting a verbosity name or its number (0, 1, 2).

    Raises:
        click.BadParameter: If the value names no verbosity.
    """
    try:
        return Verbosity.from_value(value)
    except ValueError as e:
        raise click.BadParameter(f"{value!r} is not one of quiet, fail_only, all, 0, 1, 2") from e


def summarize(context: FortestContext) -> bool:
    """Print one line per suite; return True when no suite failed."""
    all_ok = True
    for name in context.session.suite_names():
        statuses = context.session.get_test_suite_status(name)
        failed = sum(1 for s in statuses.values() if s is Status.FAIL)
        if failed:
            all_ok = False
            error(f"{name}: FAIL ({failed} of {len(statuses)} tests failed)")
        else:
            success(f"{name}: PASS ({len(statuses)} tests)")
    return all_ok


@click.command()
@click.argument("module")
@click.option(
    "--db-url",
    "db_url",
    envvar=config.DB_URL_ENV,
    show_envvar=True,
    default=None,
    help="SQLAlchemy URL of the results database. Results are not persisted when unset.",
)
@click.option(
    "--verbosity",
    "verbosity",
    metavar="[quiet|fail_only|all|0-2]",
    callback=parse_verbosity,
    envvar=config.VERBOSITY_ENV,
    show_envvar=True,
    default=config.DEFAULT_VERBOSITY,
    show_default=True,
    help="Which assertion results are reported.",
)
@click.pass_context
def run(ctx: click.Context, module: str, db_url: str | None, verbosity: Verbosity) -> None:
    """Run the tests registered by MODULE (dotted name or path to a .py file)."""
    context = build_context(verbosity=verbosity, db_url=db_url or "")
    set_context(context)
    if context.results_store_factory is None:
        warn(NOT_PERSISTED_MSG)

    loaded = load_module(module)
    if callable(hook := getattr(loaded, REGISTER_HOOK, None)):
        hook()

    logger.info(
        "Running %d suite(s) from %s", len(context.session.suite_names()), module
    )
    result = context.session.run(context.reporter, context.results_store_factory)
    all_ok = summarize(context)

    if result.error is not None:
        error(str(result.error))
        ctx.exit(1)
    ctx.exit(0 if all_ok else 1)
