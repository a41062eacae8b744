"""Scoped setup/teardown pairs bound to an opaque argument handle."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .value_objects import ArgsHandle, Scope

#: Setup/teardown callback. Receives the fixture's handle (or None).
FixtureFunction = Callable[[ArgsHandle | None], None]


@dataclass(frozen=True)
class Fixture:
    """A setup/teardown pair with an argument handle and a scope.

    Fixtures are immutable. Several tests and suites may hold the same
    instance; copies share the same handle. Errors raised by the callbacks
    propagate unchanged.

    Attributes:
        setup_fn: Called with ``args`` by :meth:`setup`; may be None.
        teardown_fn: Called with ``args`` by :meth:`teardown`; may be None.
        args: Caller-owned handle, or None.
        scope: Lifetime tier of the fixture.
    """

    setup_fn: FixtureFunction | None
    teardown_fn: FixtureFunction | None
    args: ArgsHandle | None
    scope: Scope

    @classmethod
    def args_only(cls, args: ArgsHandle | None, scope: Scope) -> Fixture:
        """Build a fixture that only carries a handle and has no callbacks."""
        return cls(None, None, args, scope)

    def setup(self) -> None:
        """Run the setup callback if defined."""
        if self.setup_fn is not None:
            self.setup_fn(self.args)

    def teardown(self) -> None:
        """Run the teardown callback if defined."""
        if self.teardown_fn is not None:
            self.teardown_fn(self.args)


def args_of(fixture: Fixture | None) -> ArgsHandle | None:
    """Return the fixture's handle, or None when there is no fixture."""
    return fixture.args if fixture is not None else None
