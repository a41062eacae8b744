"""sqlite-specific fixtures"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import URL

from fortest.adapters.db.engine import make_engine

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of an empty, file-backed SQLite database under the test's temp dir."""
    return URL.create("sqlite+pysqlite", database=str(tmp_path / "results.db")).render_as_string()


@pytest.fixture
def sqlite_engine_file(sqlite_url: str) -> Iterator[Engine]:
    """File-backed SQLite engine on an empty database (no tables).

    The results store is expected to create its own table on first use.

    Yields:
        Engine: SQLAlchemy engine pointing at a temp file DB.
    """
    test_engine = make_engine(sqlite_url)
    try:
        yield test_engine
    finally:
        test_engine.dispose()
