"""Module including value objects used across the domain layer."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from .errors import InvalidScopeError, TestBodyError


class Scope(str, Enum):
    """Lifetime tier of a fixture.

    Attributes:
        TEST: Set up and torn down around every test (and every parameter index).
        SUITE: Set up once per suite run.
        SESSION: Set up once for the whole session run.
    """

    TEST = "test"
    SUITE = "suite"
    SESSION = "session"

    @classmethod
    def from_string(cls, scope_str: str) -> Scope:
        """Parse a boundary scope string (``"test"``, ``"suite"``, ``"session"``).

        Matching is case-insensitive and ignores surrounding whitespace.

        Raises:
            InvalidScopeError: If the string names no known scope.
        """
        raw = (scope_str or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        raise InvalidScopeError(scope_str, "expected 'test', 'suite' or 'session'")


class Status(str, Enum):
    """Outcome of a test (or of one parameter index)."""

    NONE = "NONE"
    PASS = "PASS"
    FAIL = "FAIL"

    @classmethod
    def aggregate(cls, statuses: Iterable[Status]) -> Status:
        """Fold several outcomes into one: any FAIL wins, then any PASS, else NONE."""
        seen = set(statuses)
        if cls.FAIL in seen:
            return cls.FAIL
        if cls.PASS in seen:
            return cls.PASS
        return cls.NONE


class Verbosity(IntEnum):
    """How much of the assertion traffic is forwarded to the reporter.

    The integer values are part of the flat boundary (0, 1, 2).
    """

    QUIET = 0
    FAIL_ONLY = 1
    ALL = 2

    @classmethod
    def from_value(cls, value: int | str | Verbosity) -> Verbosity:
        """Parse an integer level or a level name (``"quiet"``, ``"fail_only"``, ``"all"``).

        Raises:
            ValueError: If the value is not a known verbosity.
        """
        if isinstance(value, str):
            raw = value.strip()
            if raw.isdigit():
                return cls(int(raw))
            try:
                return cls[raw.upper().replace("-", "_")]
            except KeyError as e:
                raise ValueError(f"Unknown verbosity: {value!r}") from e
        return cls(value)


@dataclass(frozen=True, eq=False)
class ArgsHandle:
    """Opaque, caller-owned argument handle passed to fixtures and test bodies.

    The framework never inspects, copies or frees ``value``; it only hands the
    same handle back to the callbacks. ``tag`` and ``size`` are declared by the
    caller and describe what the handle points to (e.g. a ``ctypes`` structure
    name and its byte size).
    """

    value: Any
    tag: str | None = None
    size: int | None = None

    def __repr__(self) -> str:
        return f"ArgsHandle(tag={self.tag!r}, size={self.size!r}, value={type(self.value).__name__})"


@dataclass(frozen=True)
class RunResult:
    """Outcome of a ``run()`` call.

    Teardown has always completed by the time a result exists. When a test body
    raised, the error is carried here instead of being propagated.
    """

    status: Status
    error: TestBodyError | None = None

    @property
    def ok(self) -> bool:
        """True when no body error is carried."""
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the carried error, if any."""
        if self.error is not None:
            raise self.error
