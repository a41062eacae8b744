"""Top of the test hierarchy: a named collection of suites."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from contextlib import ExitStack

from fortest.interfaces.reporter import FAIL, INFO, Reporter
from fortest.interfaces.results_store import ResultsStoreFactory

from .assertion import AssertionEngine
from .errors import DuplicateSuiteError, InvalidScopeError, UnknownSuiteError
from .fixture import Fixture, args_of
from .parameterized_test import ParameterizedTest, ParameterizedTestFunction
from .test import Test, TestFunction
from .test_suite import TestSuite
from .value_objects import RunResult, Scope, Status

logger = logging.getLogger(__name__)

SUITE_SCOPES = (Scope.TEST, Scope.SUITE)


class TestSession:
    """Organizes suites, owns the session fixture, and runs everything.

    Suites run in name order. The session fixture is set up once before the
    first suite and torn down once after the last, whenever it was registered.

    Args:
        engine: Assertion engine shared by every suite of the session.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, engine: AssertionEngine) -> None:
        self.engine = engine
        self._suites: dict[str, TestSuite] = {}
        self._session_fixture: Fixture | None = None

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def add_test_suite(self, name: str) -> TestSuite:
        """Create a suite; it inherits the current session fixture.

        Raises:
            DuplicateSuiteError: If a suite with that name already exists.
        """
        if name in self._suites:
            raise DuplicateSuiteError(name)
        suite = TestSuite(name, self.engine)
        self._suites[name] = suite
        if self._session_fixture is not None:
            suite.add_fixture(self._session_fixture)
        logger.debug("Registered test suite %s", name)
        return suite

    def add_fixture(self, fixture: Fixture, suite_name: str | None = None) -> None:
        """Register a fixture for the session or for one suite.

        Without ``suite_name`` the fixture must have session scope; it is stored
        and forwarded to every existing suite. With ``suite_name`` the fixture
        must have test or suite scope and is handed to that suite.

        Raises:
            InvalidScopeError: If the scope does not match the form used.
            UnknownSuiteError: If ``suite_name`` is not registered.
        """
        if suite_name is None:
            if fixture.scope is not Scope.SESSION:
                raise InvalidScopeError(
                    fixture.scope.value, "fixture without suite name must have session scope"
                )
            self._session_fixture = fixture
            for suite in self._suites.values():
                suite.add_fixture(fixture)
            logger.debug("Session fixture forwarded to %d suite(s)", len(self._suites))
            return

        if fixture.scope not in SUITE_SCOPES:
            raise InvalidScopeError(
                fixture.scope.value,
                f"fixture for suite '{suite_name}' must have test or suite scope",
            )
        self.suite(suite_name).add_fixture(fixture)

    def add_test(self, suite_name: str, test_name: str, function: TestFunction) -> Test:
        """Register a test in a suite.

        Raises:
            UnknownSuiteError: If the suite is not registered.
        """
        return self.suite(suite_name).add_test(test_name, function)

    def add_parameterized_test(
        self,
        suite_name: str,
        test_name: str,
        function: ParameterizedTestFunction,
        indices: Iterable[int],
    ) -> ParameterizedTest:
        """Register a parameterized test in a suite.

        Raises:
            UnknownSuiteError: If the suite is not registered.
        """
        return self.suite(suite_name).add_parameterized_test(test_name, function, indices)

    # --------------------------------------------------------------------- #
    # Lookup
    # --------------------------------------------------------------------- #

    def suite(self, name: str) -> TestSuite:
        """Return a registered suite.

        Raises:
            UnknownSuiteError: If the suite is not registered.
        """
        try:
            return self._suites[name]
        except KeyError as e:
            raise UnknownSuiteError(name) from e

    def has_suite(self, name: str) -> bool:
        """True if a suite with that name is registered."""
        return name in self._suites

    def suite_names(self) -> list[str]:
        """Registered suite names in execution (name) order."""
        return sorted(self._suites)

    @property
    def session_fixture(self) -> Fixture | None:
        """The registered session fixture, if any."""
        return self._session_fixture

    # --------------------------------------------------------------------- #
    # Execution
    # --------------------------------------------------------------------- #

    def run(
        self,
        reporter: Reporter,
        results_store_factory: ResultsStoreFactory | None = None,
    ) -> RunResult:
        """Run every suite in name order.

        Before each suite an args-only session fixture is injected so every
        test sees the session handle regardless of registration order. The
        session teardown runs after the last suite, also when a body error
        stopped the run; that error is then returned in the result.
        """
        reporter.log("Starting test session", INFO)

        with ExitStack() as deferred:
            if self._session_fixture is not None:
                self._session_fixture.setup()
                deferred.callback(self._session_fixture.teardown)

            session_args = args_of(self._session_fixture)
            for name in self.suite_names():
                suite = self._suites[name]
                reporter.log(f"Running test suite: {name}", INFO)
                suite.add_fixture(Fixture.args_only(session_args, Scope.SESSION))
                result = suite.run(reporter, results_store_factory)
                if not result.ok:
                    reporter.log(f"Test session aborted: {result.error}", FAIL)
                    return RunResult(self.aggregate_status(), result.error)

        reporter.log("Finished test session", INFO)
        return RunResult(self.aggregate_status())

    # --------------------------------------------------------------------- #
    # Status
    # --------------------------------------------------------------------- #

    def get_test_suite_status(self, name: str) -> dict[str, Status]:
        """Status of every test of one suite.

        Raises:
            UnknownSuiteError: If the suite is not registered.
        """
        return self.suite(name).get_statuses()

    def get_test_suite_status_code(self, name: str) -> int:
        """0 when no test of the suite failed, 1 otherwise.

        Raises:
            UnknownSuiteError: If the suite is not registered.
        """
        return self.suite(name).status_code()

    def aggregate_status(self) -> Status:
        """FAIL if any suite failed, else PASS if any passed, else NONE."""
        return Status.aggregate(s.aggregate_status() for s in self._suites.values())
