"""Unit tests.

Purpose
- Verify the domain objects, adapters and CLI helpers one at a time.

Guidelines
- No database files; use `MemoryResultsStore` and `RecordingReporter`.
- Assert on observable order (setup, body, teardown) rather than internals.
- Keep tests small, fast, and deterministic.
"""
