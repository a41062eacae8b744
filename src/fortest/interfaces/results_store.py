"""Results store interface.

Defines the contract of the optional run-history collaborator. A store is
opened by a test suite for the duration of one run (as a context manager),
creates its schema on demand, and appends one record per executed test.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Sequence
from dataclasses import dataclass

# pylint: disable=too-few-public-methods

RESULT_STATUSES = ("PASS", "FAIL")  # pragma: no mutate


class ResultsStoreError(Exception):
    """Raised when the results store cannot persist or read records."""


class InvalidResultRecordError(ResultsStoreError):
    """Raised when a record carries a status other than PASS/FAIL."""

    def __init__(self, status: str) -> None:
        super().__init__(
            f"Invalid result status {status!r}; expected one of {RESULT_STATUSES}."
        )
        self.status = status


@dataclass(frozen=True, slots=True)
class TestResultRecord:
    """One persisted test outcome.

    Attributes:
        test_name: Name of the test (parameterized variants carry their index,
            e.g. ``"name [param=3]"``).
        status: ``"PASS"`` or ``"FAIL"``.
        duration_ms: Wall-clock duration of the test body in milliseconds.
    """

    __test__ = False  # not a pytest test class

    test_name: str
    status: str
    duration_ms: int = 0

    def __post_init__(self) -> None:
        if self.status not in RESULT_STATUSES:
            raise InvalidResultRecordError(self.status)
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be >= 0")


class ResultsStore(abc.ABC):
    """Contract for a results store scoped to a single suite run."""

    def __enter__(self) -> ResultsStore:
        """Open the store and make sure its schema exists.

        The store is closed again when the schema cannot be created.
        """
        try:
            self.ensure_schema()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, *args) -> None:
        """Release any resources held by the store."""
        self.close()

    @abc.abstractmethod
    def ensure_schema(self) -> None:
        """Create the results table if it does not exist yet."""

    @abc.abstractmethod
    def record(self, result: TestResultRecord) -> None:
        """Append one result.

        Raises:
            ResultsStoreError: If the record cannot be persisted.
        """

    @abc.abstractmethod
    def results(self) -> Sequence[TestResultRecord]:
        """Return every persisted result in insertion order."""

    def close(self) -> None:
        """Release resources. The default implementation holds none."""


#: Zero-argument callable producing a fresh store; called once per suite run.
ResultsStoreFactory = Callable[[], ResultsStore]
