"""A single test case bound to up to three fixtures."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import ExitStack

from fortest.interfaces.reporter import FAIL, INFO, PASS, Reporter
from fortest.interfaces.results_store import (
    ResultsStore,
    ResultsStoreError,
    TestResultRecord,
)

from .assertion import AssertionEngine
from .errors import TestBodyError
from .fixture import Fixture, args_of
from .value_objects import ArgsHandle, RunResult, Scope, Status

logger = logging.getLogger(__name__)

#: Test body signature: (test args, suite args, session args).
TestFunction = Callable[[ArgsHandle | None, ArgsHandle | None, ArgsHandle | None], None]


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a ``time.perf_counter()`` reading."""
    return max(0, round((time.perf_counter() - start) * 1000))


def persist_result(
    results: ResultsStore | None, test_name: str, status: Status, duration_ms: int
) -> None:
    """Append a result to the store, if any.

    A store failure is logged and swallowed: the in-memory status stays as is.
    """
    if results is None or status is Status.NONE:
        return
    try:
        results.record(TestResultRecord(test_name, status.value, duration_ms))
    except ResultsStoreError:
        logger.exception("Could not persist result of test %s", test_name)


def report(reporter: Reporter | None, message: str, tag: str, border: str | None = None) -> None:
    """Forward a progress line to ``reporter`` when there is one."""
    if reporter is not None:
        reporter.log(message, tag, border)


def wrap_body_error(test_name: str, error: Exception, index: int | None = None) -> TestBodyError:
    """Wrap an error raised by a test body, keeping the original as the cause."""
    wrapped = TestBodyError(test_name, error, index)
    wrapped.__cause__ = error
    return wrapped


class Test:
    """One test case.

    A test holds its body, at most one fixture per scope, and the status of its
    last run. Only the test-scope fixture is set up and torn down here; the
    suite and session fixtures only contribute their handles.

    Args:
        name: Test name, unique within its suite.
        function: Test body, called with the test, suite and session handles.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, name: str, function: TestFunction) -> None:
        self.name = name
        self.function = function
        self._fixtures: dict[Scope, Fixture] = {}
        self._status = Status.NONE

    def add_fixture(self, fixture: Fixture) -> None:
        """Bind a fixture to the slot of its scope, replacing any previous one."""
        self._fixtures[fixture.scope] = fixture

    def fixture(self, scope: Scope) -> Fixture | None:
        """Return the fixture bound for ``scope``, if any."""
        return self._fixtures.get(scope)

    @property
    def status(self) -> Status:
        """Outcome of the last run (NONE until run)."""
        return self._status

    def run(
        self,
        engine: AssertionEngine,
        reporter: Reporter | None = None,
        results: ResultsStore | None = None,
    ) -> RunResult:
        """Run the test once.

        The test-scope teardown always runs, including when the body raises.
        A body error marks the test FAIL and is returned in the result after
        teardown has completed. Errors raised by the fixture callbacks
        themselves propagate.

        Args:
            engine: Shared assertion engine; reset before the body runs.
            reporter: Optional progress reporter ("Running test", then
                "Test passed" or "Test failed" once teardown is done).
            results: Optional store receiving ``(name, status, duration)`` after
                a run without body error.

        Returns:
            RunResult: The new status and any carried body error.
        """
        test_fixture = self._fixtures.get(Scope.TEST)
        handles = (
            args_of(test_fixture),
            args_of(self._fixtures.get(Scope.SUITE)),
            args_of(self._fixtures.get(Scope.SESSION)),
        )

        report(reporter, f"Running test: {self.name}", INFO)
        error: TestBodyError | None = None
        with ExitStack() as deferred:
            if test_fixture is not None:
                test_fixture.setup()
                deferred.callback(test_fixture.teardown)

            engine.reset()
            start = time.perf_counter()
            try:
                self.function(*handles)
            except Exception as e:  # pylint: disable=broad-except
                logger.error("Test %s raised %s: %s", self.name, type(e).__name__, e)
                error = wrap_body_error(self.name, e)
                self._status = Status.FAIL
            else:
                self._status = Status.PASS if engine.failed == 0 else Status.FAIL
            duration_ms = elapsed_ms(start)

        if self._status is Status.PASS:
            report(reporter, f"Test passed: {self.name}", PASS)
        else:
            report(reporter, f"Test failed: {self.name}", FAIL)

        if error is None:
            persist_result(results, self.name, self._status, duration_ms)
        logger.debug("Test %s finished with status %s", self.name, self._status.value)
        return RunResult(self._status, error)
