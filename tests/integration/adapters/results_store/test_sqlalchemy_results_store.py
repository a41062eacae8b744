"""Integration tests for the SQLAlchemy results store on SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect, select, text

from fortest.adapters.results_store import SqlAlchemyResultsStore, sqlalchemy_store_factory
from fortest.adapters.results_store.schema import test_results as results_table
from fortest.interfaces.results_store import ResultsStoreError, TestResultRecord

# pylint: disable=redefined-outer-name


@pytest.fixture
def store(sqlite_engine_file):
    """A store over an empty file database, opened for the test."""
    with SqlAlchemyResultsStore(sqlite_engine_file) as opened:
        yield opened


def test_schema_is_created_on_open(sqlite_engine_file):
    """Opening the store creates the results table once; reopening is harmless."""
    assert not inspect(sqlite_engine_file).has_table("test_results")

    with SqlAlchemyResultsStore(sqlite_engine_file):
        pass
    with SqlAlchemyResultsStore(sqlite_engine_file):
        pass

    assert inspect(sqlite_engine_file).has_table("test_results")


def test_records_round_trip_in_order(store):
    """Records come back in insertion order."""
    store.record(TestResultRecord("adds", "PASS", 4))
    store.record(TestResultRecord("grid [param=1]", "FAIL", 0))

    assert store.results() == [
        TestResultRecord("adds", "PASS", 4),
        TestResultRecord("grid [param=1]", "FAIL", 0),
    ]


def test_records_are_committed_immediately(store, sqlite_engine_file):
    """Rows are visible to other connections without closing the store."""
    store.record(TestResultRecord("t", "PASS", 1))

    with sqlite_engine_file.connect() as conn:
        rows = conn.execute(select(results_table.c.test_name, results_table.c.recorded_at)).all()

    assert [r.test_name for r in rows] == ["t"]
    assert rows[0].recorded_at is not None


def test_check_constraint_rejects_bad_status(store):
    """The table refuses statuses other than PASS/FAIL."""
    with pytest.raises(Exception):  # pylint: disable=broad-exception-caught
        store.connection.execute(
            text("INSERT INTO test_results (test_name, status, duration_ms) VALUES ('x', 'NONE', 0)")
        )
    store.connection.rollback()
    assert store.results() == []


def test_close_releases_the_connection(sqlite_engine_file):
    """close() drops the connection; the store reconnects lazily afterwards."""
    store = SqlAlchemyResultsStore(sqlite_engine_file)
    with store:
        first = store.connection
    assert first.closed
    with store:
        assert store.connection is not first


def test_unreachable_database_raises_store_error(tmp_path):
    """A database that cannot be opened maps to ResultsStoreError."""
    url = f"sqlite+pysqlite:///{tmp_path / 'missing-dir' / 'results.db'}"
    factory = sqlalchemy_store_factory(url)
    with pytest.raises(ResultsStoreError):
        with factory():
            pass  # pragma: no cover


def test_factory_builds_independent_stores(sqlite_url):
    """Each call gives a new store sharing the same engine."""
    factory = sqlalchemy_store_factory(sqlite_url)
    first, second = factory(), factory()

    assert first is not second
    assert first.engine is second.engine

    with first:
        first.record(TestResultRecord("a", "PASS"))
    with second:
        assert [r.test_name for r in second.results()] == ["a"]
    first.engine.dispose()
