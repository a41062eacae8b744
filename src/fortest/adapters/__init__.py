"""Adapters (infrastructure) for FORTEST.

Provide concrete implementations of the interfaces: console and in-memory
reporters, SQLAlchemy engine and results-store persistence, and the `ctypes`
layer that turns compiled-library symbols into callables.

Dependency rule: may import `fortest.domain` and `fortest.interfaces`; the
domain must not import this package.
"""
