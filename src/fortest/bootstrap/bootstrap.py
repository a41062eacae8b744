"""Build the runtime context and hold the process-wide instance."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from fortest import config
from fortest.adapters.reporters import ConsoleReporter
from fortest.adapters.results_store import sqlalchemy_store_factory
from fortest.domain.assertion import AssertionEngine
from fortest.domain.test_session import TestSession
from fortest.domain.value_objects import Verbosity
from fortest.interfaces.reporter import Reporter
from fortest.interfaces.results_store import ResultsStoreFactory

logger = logging.getLogger(__name__)

ASSERT_PREFIX = "[ASSERT]"  # pragma: no mutate


@dataclass(frozen=True)
class FortestContext:
    """Everything a boundary call needs, built once per process.

    Attributes:
        engine: Assertion engine shared by every test.
        session: The test session receiving registrations.
        reporter: Receives session/suite/test progress.
        results_store_factory: Builds one results store per suite run, or None
            when persistence is disabled.
    """

    engine: AssertionEngine
    session: TestSession
    reporter: Reporter
    results_store_factory: ResultsStoreFactory | None = None


def build_context(
    reporter: Reporter | None = None,
    assert_reporter: Reporter | None = None,
    verbosity: Verbosity | int | str | None = None,
    db_url: str | None = None,
) -> FortestContext:
    """Wire a new context.

    Args:
        reporter: Progress reporter. Defaults to a :class:`ConsoleReporter`.
        assert_reporter: Reporter for assertion messages. Defaults to a
            console reporter with an ``[ASSERT]`` prefix.
        verbosity: Default assertion verbosity. Defaults to `FORTEST_VERBOSITY`.
        db_url: Results database URL. Defaults to `FORTEST_DB_URL`; when
            neither is set, results are not persisted.

    Returns:
        FortestContext: A fresh, empty context.
    """
    reporter = reporter or ConsoleReporter()
    if assert_reporter is None:
        assert_reporter = ConsoleReporter(prefix=ASSERT_PREFIX)
    level = Verbosity.from_value(verbosity if verbosity is not None else config.get_verbosity())

    url = db_url if db_url is not None else config.get_optional_db_url()
    factory = sqlalchemy_store_factory(url) if url else None

    engine = AssertionEngine(assert_reporter, level)
    logger.debug(
        "Built context: verbosity=%s, persistence=%s", level.name, "ON" if factory else "OFF"
    )
    return FortestContext(
        engine=engine,
        session=TestSession(engine),
        reporter=reporter,
        results_store_factory=factory,
    )


_context: FortestContext | None = None
_context_lock = threading.Lock()


def get_context() -> FortestContext:
    """Return the process-wide context, building it on first use.

    Construction happens at most once, even when several threads race for
    the first call. Writes into the returned context are not synchronized.
    """
    global _context  # pylint: disable=global-statement
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = build_context()
    return _context


def set_context(context: FortestContext) -> None:
    """Install an explicitly built context as the process-wide one."""
    global _context  # pylint: disable=global-statement
    with _context_lock:
        _context = context


def reset_context() -> None:
    """Forget the process-wide context; the next access builds a new one."""
    global _context  # pylint: disable=global-statement
    with _context_lock:
        _context = None
