"""Global pytest fixtures for FORTEST."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from fortest import config
from fortest.bootstrap import reset_context

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.runtime",
]

TESTS_ROOT = Path(__file__).parent.resolve()

# first directory below tests/ -> default marker
LAYER_MARKS = {
    "unit": pytest.mark.unit,
    "integration": pytest.mark.integration,
    "e2e": pytest.mark.e2e,
}


def layer_of(item: pytest.Item) -> str | None:
    """Name of the tests/ subdirectory holding ``item``, if any."""
    try:
        parts = item.path.resolve().relative_to(TESTS_ROOT).parts
    except ValueError:
        return None
    return parts[0] if len(parts) > 1 else None


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark each item with its layer unless it already carries that mark."""
    for item in items:
        mark = LAYER_MARKS.get(layer_of(item) or "")
        if mark is not None and item.get_closest_marker(mark.name) is None:
            item.add_marker(mark)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test without FORTEST_* settings and with no process-wide context."""
    monkeypatch.delenv(config.DB_URL_ENV, raising=False)
    monkeypatch.delenv(config.VERBOSITY_ENV, raising=False)
    reset_context()
    yield
    reset_context()
