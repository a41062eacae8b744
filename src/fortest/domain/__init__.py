"""Domain layer for FORTEST.

Holds the test hierarchy (session, suite, test, parameterized test), the
fixture lifecycle, and the assertion engine. Pure Python with no I/O: output
goes through the `Reporter` interface and persistence through the
`ResultsStore` interface.

Dependency rule: may import `fortest.interfaces`; must not import
`fortest.adapters`, `fortest.bootstrap`, or `fortest.entrypoints`.
"""
