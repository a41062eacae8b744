"""Assertion engine: pass/fail counters plus tolerant/exact comparisons.

Failing assertions are not errors. They only move the counters and never
interrupt the test body; a test's status is derived from the failed counter
once the body returns.

Floating-point comparisons (either side a ``float``) pass when::

    |expected - actual| <= abs_tol
    or |expected - actual| <= rel_tol * max(|expected|, |actual|)

Every other type is compared with ``==``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from fortest.interfaces.reporter import FAIL, PASS, Reporter

from .value_objects import Verbosity

logger = logging.getLogger(__name__)


def to_string_repr(value: Any) -> str:
    """Render a value for an assertion message.

    Strings are returned verbatim, iterables (other than strings and bytes)
    become ``[a, b, c]`` with each element rendered recursively, and anything
    else goes through ``str()``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray, dict)):
        return "[" + ", ".join(to_string_repr(v) for v in value) + "]"
    return str(value)


def is_floating(expected: Any, actual: Any) -> bool:
    """True when either operand is floating point and tolerances apply."""
    return isinstance(expected, float) or isinstance(actual, float)


def nearly_equal(expected: float, actual: float, abs_tol: float, rel_tol: float) -> bool:
    """Tolerant float comparison (absolute OR relative).

    Identical values are always equal, NaN never is, and an infinity is only
    close to itself.
    """
    if expected == actual:
        return True
    if math.isinf(expected) or math.isinf(actual):
        return False
    diff = abs(expected - actual)
    return diff <= abs_tol or diff <= rel_tol * max(abs(expected), abs(actual))


class AssertionEngine:
    """Shared assertion counters.

    Args:
        reporter: Collaborator receiving PASS/FAIL messages, subject to verbosity.
            When None, nothing is forwarded.
        verbosity: Default verbosity for calls that do not pass their own.

    Note:
        Verbosity only decides what is forwarded to the reporter. It never
        influences the counters.
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        verbosity: Verbosity = Verbosity.FAIL_ONLY,
    ) -> None:
        self.reporter = reporter
        self.verbosity = verbosity
        self._num_passed = 0
        self._num_failed = 0

    # --------------------------------------------------------------------- #
    # Counters
    # --------------------------------------------------------------------- #

    @property
    def passed(self) -> int:
        """Number of passed assertions since the last reset."""
        return self._num_passed

    @property
    def failed(self) -> int:
        """Number of failed assertions since the last reset."""
        return self._num_failed

    def reset(self) -> None:
        """Zero both counters."""
        self._num_passed = self._num_failed = 0

    # --------------------------------------------------------------------- #
    # Assertions
    # --------------------------------------------------------------------- #

    def assert_equal(
        self,
        expected: Any,
        actual: Any,
        abs_tol: float = 0.0,
        rel_tol: float = 0.0,
        verbosity: Verbosity | None = None,
    ) -> bool:
        """Assert that two values are equal (within tolerance for floats).

        Returns:
            bool: Whether the assertion passed.
        """
        if is_floating(expected, actual):
            passed = nearly_equal(expected, actual, abs_tol, rel_tol)
        else:
            passed = bool(expected == actual)

        exp, act = to_string_repr(expected), to_string_repr(actual)
        return self._record(
            passed,
            pass_msg=f"values are equal ({exp} == {act})",
            fail_msg=f"values are not equal ({exp} != {act})",
            verbosity=verbosity,
        )

    def assert_not_equal(
        self,
        expected: Any,
        actual: Any,
        abs_tol: float = 0.0,
        rel_tol: float = 0.0,
        verbosity: Verbosity | None = None,
    ) -> bool:
        """Assert that two values differ (beyond tolerance for floats).

        Returns:
            bool: Whether the assertion passed.
        """
        if is_floating(expected, actual):
            passed = not nearly_equal(expected, actual, abs_tol, rel_tol)
        else:
            passed = bool(expected != actual)

        exp, act = to_string_repr(expected), to_string_repr(actual)
        return self._record(
            passed,
            pass_msg=f"values are not equal ({exp} != {act})",
            fail_msg=f"values are equal ({exp} == {act})",
            verbosity=verbosity,
        )

    def assert_true(self, condition: Any, verbosity: Verbosity | None = None) -> bool:
        """Assert that a condition is truthy."""
        return self._record(
            bool(condition),
            pass_msg="condition is true",
            fail_msg="condition is false",
            verbosity=verbosity,
        )

    def assert_false(self, condition: Any, verbosity: Verbosity | None = None) -> bool:
        """Assert that a condition is falsy."""
        return self._record(
            not condition,
            pass_msg="condition is false",
            fail_msg="condition is true",
            verbosity=verbosity,
        )

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _record(
        self, passed: bool, *, pass_msg: str, fail_msg: str, verbosity: Verbosity | None
    ) -> bool:
        level = self.verbosity if verbosity is None else Verbosity.from_value(verbosity)
        if passed:
            self._num_passed += 1
            if level == Verbosity.ALL:
                self._forward(pass_msg, PASS)
        else:
            self._num_failed += 1
            logger.debug("Assertion failed: %s", fail_msg)
            if level != Verbosity.QUIET:
                self._forward(fail_msg, FAIL)
        return passed

    def _forward(self, message: str, tag: str) -> None:
        if self.reporter is not None:
            self.reporter.log(message, tag)
