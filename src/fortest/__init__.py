"""FORTEST

Runtime orchestration core of a unit-test framework for code that can only be
driven through a flat, exception-free function-pointer boundary (e.g. compiled
Fortran or C modules). Tests are grouped into suites within a session, share
scoped fixtures, and report through a narrow logging interface.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
