"""Configuration utilities for FORTEST.

This module centralizes small helpers and constants related to runtime
configuration. Values come from the environment so that compiled test
programs can be configured without touching their source.
"""

import os

DB_URL_ENV = "FORTEST_DB_URL"  # pragma: no mutate
VERBOSITY_ENV = "FORTEST_VERBOSITY"  # pragma: no mutate

DEFAULT_VERBOSITY = "fail_only"  # pragma: no mutate


class DatabaseUrlNotSetError(Exception):
    """Raised when the FORTEST_DB_URL environment variable is not set."""


def get_db_url() -> str:
    """Get the results database URL from the environment.

    Returns:
        The value of the `FORTEST_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `FORTEST_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_optional_db_url() -> str | None:
    """Return the results database URL, or None when persistence is disabled."""
    try:
        return get_db_url()
    except DatabaseUrlNotSetError:
        return None


def get_verbosity() -> str:
    """Get the default assertion verbosity from the environment.

    The raw value is returned untouched (e.g. ``"all"`` or ``"2"``); parsing
    happens in :meth:`fortest.domain.value_objects.Verbosity.from_value`.

    Returns:
        The value of `FORTEST_VERBOSITY`, or ``"fail_only"`` when unset or blank.
    """
    return os.environ.get(VERBOSITY_ENV, "").strip() or DEFAULT_VERBOSITY
