"""In-memory ResultsStore for tests and local development.

Records live in a plain list shared by every store built from the same
:class:`MemoryResultsStore` instance; nothing survives the process.
"""

from __future__ import annotations

from collections.abc import Sequence

from fortest.interfaces.results_store import ResultsStore, TestResultRecord


class MemoryResultsStore(ResultsStore):
    """Non-durable results store.

    ``schema_created`` counts calls to :meth:`ensure_schema` and ``closed``
    tells whether :meth:`close` ran, so tests can observe the store lifecycle.
    """

    def __init__(self, records: list[TestResultRecord] | None = None) -> None:
        self._records = records if records is not None else []
        self.schema_created = 0
        self.closed = False

    def ensure_schema(self) -> None:
        self.schema_created += 1
        self.closed = False

    def record(self, result: TestResultRecord) -> None:
        self._records.append(result)

    def results(self) -> Sequence[TestResultRecord]:
        return list(self._records)

    def close(self) -> None:
        self.closed = True
