"""Bootstrap (composition root) for FORTEST.

Assembles the runtime: wires the assertion engine, the test session, the
reporters and the optional results store into a :class:`FortestContext`, and
owns the process-wide context used by the flat boundary.

Import rules:
- Entry points import *this* package (not adapters/domain directly, where avoidable).
- This package may import: `fortest.adapters`, `fortest.interfaces`,
  `fortest.domain`, and `fortest.config`.
- Inner layers must not import `fortest.bootstrap`.
"""

from .bootstrap import (
    FortestContext,
    build_context,
    get_context,
    reset_context,
    set_context,
)

__all__ = ["FortestContext", "build_context", "get_context", "reset_context", "set_context"]
