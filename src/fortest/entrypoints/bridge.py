"""Flat boundary for callers that cannot handle structured errors.

Every entry point here is a plain function over simple values (strings,
integers, callables or raw function addresses, argument handles). They all
act on the process-wide :class:`~fortest.bootstrap.FortestContext` unless a
``context`` is passed explicitly.

Boundary contract
-----------------
No failure ever returns control to the caller. Any exception escaping an
entry point (unknown scope string, unknown or duplicate suite, an error
raised by a test body during the run, ...) is logged at CRITICAL, written to
stderr as::

    [FORTEST FATAL] Exception in <entry point>: <message>

and the process is terminated immediately with exit status 134.

Failing *assertions* are not failures of the boundary: they only move the
counters of the assertion engine.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterable
from typing import Any, NoReturn, TypeVar

import click

from fortest.adapters.foreign import CallbackKind, from_address
from fortest.bootstrap import FortestContext, get_context
from fortest.domain.fixture import Fixture
from fortest.domain.value_objects import ArgsHandle, Scope, Verbosity
from fortest.logging import flush_all

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 134  # pragma: no mutate
FATAL_PREFIX = "[FORTEST FATAL]"  # pragma: no mutate

F = TypeVar("F", bound=Callable[..., Any])


# ============================================================================
#                           Fatal termination
# ============================================================================


def _terminate(code: int) -> NoReturn:
    os._exit(code)  # pylint: disable=protected-access


def fatal(entry_point: str, error: BaseException) -> NoReturn:
    """Report an internal failure of ``entry_point`` and terminate the process."""
    message = f"{FATAL_PREFIX} Exception in {entry_point}: {error}"
    # without handlers the record would reach stderr twice (lastResort + secho)
    if logger.hasHandlers():
        logger.critical(message, exc_info=error)
    click.secho(message, fg="red", bold=True, err=True)
    flush_all()
    _terminate(FATAL_EXIT_CODE)


def boundary(entry_point: str) -> Callable[[F], F]:
    """Turn anything raised by the wrapped function into :func:`fatal`.

    SystemExit and KeyboardInterrupt are fatal too: control never returns to
    the caller after a failure.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except BaseException as e:  # pylint: disable=broad-exception-caught
                fatal(entry_point, e)

        return wrapper  # type: ignore[return-value]

    return decorator


# ============================================================================
#                           Input normalization
# ============================================================================


def _resolve(context: FortestContext | None) -> FortestContext:
    return context if context is not None else get_context()


def _as_handle(args: Any) -> ArgsHandle | None:
    if args is None or isinstance(args, ArgsHandle):
        return args
    return ArgsHandle(args)


def _as_callable(fn: Callable[..., None] | int | None, kind: CallbackKind) -> Callable[..., None] | None:
    if fn is None or callable(fn):
        return fn
    if isinstance(fn, int):
        return from_address(fn, kind)
    raise TypeError(f"Expected a callable or a function address, got {type(fn).__name__}")


def _require_callable(fn: Callable[..., None] | int | None, kind: CallbackKind) -> Callable[..., None]:
    resolved = _as_callable(fn, kind)
    if resolved is None:
        raise TypeError(f"A {kind.value} function is required")
    return resolved


# ============================================================================
#                           Registration
# ============================================================================


@boundary("register_test_suite")
def register_test_suite(name: str, *, context: FortestContext | None = None) -> None:
    """Register a new test suite."""
    _resolve(context).session.add_test_suite(name)


@boundary("register_fixture")
def register_fixture(  # pylint: disable=too-many-arguments
    suite_name: str,
    setup: Callable[..., None] | int | None,
    teardown: Callable[..., None] | int | None,
    args: Any,
    scope: str,
    *,
    context: FortestContext | None = None,
) -> None:
    """Register a fixture.

    An empty ``suite_name`` registers a session fixture and is only valid with
    scope ``"session"``. Otherwise the fixture goes to the named suite and
    must have scope ``"test"`` or ``"suite"``.

    ``setup``/``teardown`` may be callables, raw function addresses, or None.
    ``args`` may be an :class:`ArgsHandle`, None, or any object (wrapped into
    a handle as is).
    """
    scope_enum = Scope.from_string(scope)
    fixture = Fixture(
        _as_callable(setup, CallbackKind.FIXTURE),
        _as_callable(teardown, CallbackKind.FIXTURE),
        _as_handle(args),
        scope_enum,
    )
    session = _resolve(context).session
    if not suite_name and scope_enum is Scope.SESSION:
        session.add_fixture(fixture)
    else:
        session.add_fixture(fixture, suite_name=suite_name)


@boundary("register_test")
def register_test(
    suite_name: str,
    test_name: str,
    fn: Callable[..., None] | int,
    *,
    context: FortestContext | None = None,
) -> None:
    """Register a test body ``fn(test_args, suite_args, session_args)``."""
    _resolve(context).session.add_test(
        suite_name, test_name, _require_callable(fn, CallbackKind.TEST)
    )


@boundary("register_parameterized_test")
def register_parameterized_test(
    suite_name: str,
    test_name: str,
    fn: Callable[..., None] | int,
    indices: Iterable[int],
    *,
    context: FortestContext | None = None,
) -> None:
    """Register a body ``fn(test_args, suite_args, session_args, idx)`` run once per index."""
    _resolve(context).session.add_parameterized_test(
        suite_name, test_name, _require_callable(fn, CallbackKind.PARAMETERIZED), indices
    )


# ============================================================================
#                           Execution and queries
# ============================================================================


@boundary("run_test_session")
def run_test_session(*, context: FortestContext | None = None) -> None:
    """Run every registered suite; a test body error is fatal."""
    ctx = _resolve(context)
    ctx.session.run(ctx.reporter, ctx.results_store_factory).raise_for_error()


@boundary("get_test_suite_status")
def get_test_suite_status(suite_name: str, *, context: FortestContext | None = None) -> int:
    """Return 0 if every test of the suite passed (or did not run), 1 otherwise."""
    return _resolve(context).session.get_test_suite_status_code(suite_name)


def finalize_suite(suite_name: str, *, context: FortestContext | None = None) -> NoReturn:
    """Exit the process with the status code of ``suite_name``."""
    raise SystemExit(get_test_suite_status(suite_name, context=context))


# ============================================================================
#                           Assertions
# ============================================================================


@boundary("assert_true")
def assert_true(
    condition: Any,
    verbosity: Verbosity | int | None = None,
    *,
    context: FortestContext | None = None,
) -> None:
    """Assert that ``condition`` is truthy."""
    _resolve(context).engine.assert_true(condition, _verbosity(verbosity))


@boundary("assert_false")
def assert_false(
    condition: Any,
    verbosity: Verbosity | int | None = None,
    *,
    context: FortestContext | None = None,
) -> None:
    """Assert that ``condition`` is falsy."""
    _resolve(context).engine.assert_false(condition, _verbosity(verbosity))


@boundary("assert_equal")
def assert_equal(  # pylint: disable=too-many-arguments
    expected: Any,
    actual: Any,
    abs_tol: float = 0.0,
    rel_tol: float = 0.0,
    verbosity: Verbosity | int | None = None,
    *,
    context: FortestContext | None = None,
) -> None:
    """Assert equality; floats compare within ``abs_tol`` or ``rel_tol``."""
    _resolve(context).engine.assert_equal(
        expected, actual, abs_tol, rel_tol, _verbosity(verbosity)
    )


@boundary("assert_not_equal")
def assert_not_equal(  # pylint: disable=too-many-arguments
    expected: Any,
    actual: Any,
    abs_tol: float = 0.0,
    rel_tol: float = 0.0,
    verbosity: Verbosity | int | None = None,
    *,
    context: FortestContext | None = None,
) -> None:
    """Assert inequality; floats must differ beyond both tolerances."""
    _resolve(context).engine.assert_not_equal(
        expected, actual, abs_tol, rel_tol, _verbosity(verbosity)
    )


def _verbosity(value: Verbosity | int | None) -> Verbosity | None:
    return None if value is None else Verbosity.from_value(value)
