"""Interfaces (application boundary) for FORTEST.

Defines framework-free contracts shared by the domain and adapters: the
reporting collaborator consumed by suites and the assertion engine, and the
results store consulted for optional persistence.

Dependency rule: this package is independent; do not import from any other
`fortest.*` modules. It may be imported by `fortest.domain`,
`fortest.adapters`, and `fortest.bootstrap`.
"""
