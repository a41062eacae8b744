"""Engine factory for the results database.

Any SQLAlchemy URL is accepted. SQLite files get connection PRAGMAs suited to
an append-only history that several test programs may write in turn: WAL
journaling, relaxed fsync and a busy timeout instead of immediate lock errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SQLITE_BACKEND = "sqlite"  # pragma: no mutate

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=5000;",
)


def is_sqlite(url: str | URL) -> bool:
    """True when ``url`` points at a SQLite database (any driver)."""
    return make_url(str(url)).get_backend_name() == SQLITE_BACKEND


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create the Engine used by the results store.

    Args:
        url: Database URL (str or :class:`URL`).
        echo: If True, SQLAlchemy logs every statement.

    Returns:
        Engine: Engine with SQLite PRAGMAs applied on connect where relevant.
    """
    engine = create_engine(url, echo=echo)
    logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _apply_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            for pragma in SQLITE_PRAGMAS:
                cur.execute(pragma)
            cur.close()

    return engine
