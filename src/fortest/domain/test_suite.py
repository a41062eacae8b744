"""A named collection of tests sharing per-scope fixture slots.

Fixture propagation
-------------------
A suite keeps one slot per scope. ``add_fixture`` stores the fixture in the
slot of its scope, replacing whatever was there, and forwards it to every
test already registered. Tests registered later receive the current slot
values at registration time. The most recently added fixture therefore wins
everywhere, for old and new tests alike.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import ExitStack

from fortest.interfaces.reporter import Reporter
from fortest.interfaces.results_store import (
    ResultsStore,
    ResultsStoreError,
    ResultsStoreFactory,
)

from .assertion import AssertionEngine
from .fixture import Fixture
from .parameterized_test import ParameterizedTest, ParameterizedTestFunction
from .test import Test, TestFunction
from .value_objects import RunResult, Scope, Status

logger = logging.getLogger(__name__)


class TestSuite:
    """Named collection of tests and parameterized tests.

    Args:
        name: Suite name, unique within its session.
        engine: Assertion engine shared by every test of the suite.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, name: str, engine: AssertionEngine) -> None:
        self.name = name
        self._engine = engine
        self._tests: dict[str, Test] = {}
        self._parameterized_tests: dict[str, ParameterizedTest] = {}
        self._fixtures: dict[Scope, Fixture] = {}

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def add_fixture(self, fixture: Fixture) -> None:
        """Store a fixture in its scope slot and forward it to every registered test."""
        if self._fixtures.get(fixture.scope) not in (None, fixture):
            logger.debug(
                "Suite %s: replacing %s fixture", self.name, fixture.scope.value
            )
        self._fixtures[fixture.scope] = fixture
        for entity in self._entities():
            entity.add_fixture(fixture)
        logger.debug(
            "Suite %s: %s fixture forwarded to %d test(s)",
            self.name,
            fixture.scope.value,
            len(self._tests) + len(self._parameterized_tests),
        )

    def fixture(self, scope: Scope) -> Fixture | None:
        """Return the fixture in the slot for ``scope``, if any."""
        return self._fixtures.get(scope)

    def add_test(self, test_name: str, function: TestFunction) -> Test:
        """Register a test; an existing entry under the same name is replaced."""
        test = Test(test_name, function)
        self._attach(test)
        self._forget(test_name)
        self._tests[test_name] = test
        return test

    def add_parameterized_test(
        self,
        test_name: str,
        function: ParameterizedTestFunction,
        indices: Iterable[int],
    ) -> ParameterizedTest:
        """Register a parameterized test; an existing entry under the same name is replaced."""
        test = ParameterizedTest(test_name, function, indices)
        self._attach(test)
        self._forget(test_name)
        self._parameterized_tests[test_name] = test
        return test

    @property
    def tests(self) -> dict[str, Test]:
        """Registered tests by name, in insertion order."""
        return dict(self._tests)

    @property
    def parameterized_tests(self) -> dict[str, ParameterizedTest]:
        """Registered parameterized tests by name, in insertion order."""
        return dict(self._parameterized_tests)

    # --------------------------------------------------------------------- #
    # Execution
    # --------------------------------------------------------------------- #

    def run(
        self,
        reporter: Reporter,
        results_store_factory: ResultsStoreFactory | None = None,
    ) -> RunResult:
        """Run every test, then every parameterized test, in insertion order.

        The suite-scope fixture is set up first and torn down last, also when a
        test body raised. The first body error stops the suite and is returned
        in the result once teardown has completed.

        Args:
            reporter: Receives progress and PASS/FAIL lines.
            results_store_factory: When given, a store is opened for this run
                only and closed at its end.

        Returns:
            RunResult: The aggregate suite status and any carried body error.
        """
        with ExitStack() as deferred:
            suite_fixture = self._fixtures.get(Scope.SUITE)
            if suite_fixture is not None:
                suite_fixture.setup()
                deferred.callback(suite_fixture.teardown)

            results = self._open_results(deferred, results_store_factory)

            for test in list(self._tests.values()):
                result = test.run(self._engine, reporter, results)
                if not result.ok:
                    return RunResult(self.aggregate_status(), result.error)

            for test in list(self._parameterized_tests.values()):
                result = test.run(self._engine, reporter, results)
                if not result.ok:
                    return RunResult(self.aggregate_status(), result.error)

        return RunResult(self.aggregate_status())

    # --------------------------------------------------------------------- #
    # Status
    # --------------------------------------------------------------------- #

    def get_statuses(self) -> dict[str, Status]:
        """Status of every entry by name.

        Parameterized tests contribute their aggregate status.
        """
        statuses = {name: test.status for name, test in self._tests.items()}
        statuses.update(
            (name, test.aggregate_status())
            for name, test in self._parameterized_tests.items()
        )
        return statuses

    def aggregate_status(self) -> Status:
        """FAIL if any entry failed, else PASS if any passed, else NONE."""
        return Status.aggregate(self.get_statuses().values())

    def status_code(self) -> int:
        """0 when no entry failed, 1 otherwise."""
        return int(Status.FAIL in self.get_statuses().values())

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _entities(self) -> Iterator[Test | ParameterizedTest]:
        yield from self._tests.values()
        yield from self._parameterized_tests.values()

    def _attach(self, entity: Test | ParameterizedTest) -> None:
        for fixture in self._fixtures.values():
            entity.add_fixture(fixture)

    def _forget(self, test_name: str) -> None:
        if self._tests.pop(test_name, None) or self._parameterized_tests.pop(test_name, None):
            logger.warning("Suite %s: test %s registered again; replacing it", self.name, test_name)

    def _open_results(
        self, deferred: ExitStack, factory: ResultsStoreFactory | None
    ) -> ResultsStore | None:
        if factory is None:
            return None
        try:
            return deferred.enter_context(factory())
        except ResultsStoreError:
            logger.exception("Suite %s: results store unavailable; not persisting", self.name)
            return None
