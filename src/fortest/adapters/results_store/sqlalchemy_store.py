"""SQLAlchemy-backed ResultsStore adapter.

The store borrows an Engine, opens one Connection for the lifetime of the
context manager, creates the ``test_results`` table on first use, and commits
each record immediately so a crashing test program still leaves the rows of
the tests that ran before it.

SQLAlchemy errors are mapped to :class:`ResultsStoreError`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError

from fortest.adapters.db.engine import make_engine
from fortest.interfaces.results_store import (
    ResultsStore,
    ResultsStoreError,
    ResultsStoreFactory,
    TestResultRecord,
)

from .schema import test_results

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


class SqlAlchemyResultsStore(ResultsStore):
    """Results store persisting to the ``test_results`` table."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._connection: Connection | None = None

    @property
    def connection(self) -> Connection:
        """The open connection; opened lazily on first use."""
        if self._connection is None:
            try:
                self._connection = self.engine.connect()
            except SQLAlchemyError as e:
                raise ResultsStoreError(str(e)) from e
        return self._connection

    def ensure_schema(self) -> None:
        try:
            test_results.create(self.connection, checkfirst=True)
            self.connection.commit()
        except SQLAlchemyError as e:
            raise ResultsStoreError(str(e)) from e

    def record(self, result: TestResultRecord) -> None:
        stmt = insert(test_results).values(
            test_name=result.test_name,
            status=result.status,
            duration_ms=result.duration_ms,
        )
        try:
            self.connection.execute(stmt)
            self.connection.commit()
        except SQLAlchemyError as e:
            self.connection.rollback()
            raise ResultsStoreError(str(e)) from e
        logger.debug("Persisted result %s=%s", result.test_name, result.status)

    def results(self) -> Sequence[TestResultRecord]:
        stmt = select(
            test_results.c.test_name,
            test_results.c.status,
            test_results.c.duration_ms,
        ).order_by(test_results.c.id.asc())
        try:
            rows = self.connection.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise ResultsStoreError(str(e)) from e
        return [TestResultRecord(**row) for row in rows]

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def sqlalchemy_store_factory(url: str) -> ResultsStoreFactory:
    """Build a factory producing one SqlAlchemyResultsStore per suite run.

    The Engine (and its pool) is shared by the stores; connections are not.
    """
    engine = make_engine(url)
    return lambda: SqlAlchemyResultsStore(engine)
