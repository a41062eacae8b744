"""Results table schema.

Defines the append-only ``test_results`` table. Each row is the outcome of
one test (or one parameter index of a parameterized test) in one run.

Constraints (enforced here):

| Constraint                      | Purpose                    |
|---------------------------------|----------------------------|
| CHECK(status IN ('PASS','FAIL')) | only final outcomes stored |
| CHECK(duration_ms >= 0)         | durations are non-negative |
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    func,
    text,
)

__all__ = ["metadata", "test_results"]

#: Metadata of the results database; constraint names are deterministic.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

test_results = Table(
    "test_results",
    metadata,
    Column(
        "id",
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Monotonically increasing row id; gives insertion order.",
    ),
    Column(
        "test_name",
        String(400),
        nullable=False,
        comment="Test name; parameterized variants carry their index.",
    ),
    Column(
        "status",
        String(4),
        nullable=False,
        comment="PASS or FAIL.",
    ),
    Column(
        "duration_ms",
        Integer,
        nullable=False,
        server_default=text("0"),
        comment="Wall-clock duration of the test body in milliseconds.",
    ),
    Column(
        "recorded_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        comment="Server-assigned timestamp (UTC on SQLite).",
    ),
    CheckConstraint("status IN ('PASS', 'FAIL')", name="valid_status"),
    CheckConstraint("duration_ms >= 0", name="non_negative_duration"),
    Index(None, "test_name"),
    comment="Append-only test run history. One row per executed test.",
)
