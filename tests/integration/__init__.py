"""Integration tests.

Purpose
- Exercise the SQLAlchemy results store and whole sessions against SQLite files.

Guidelines
- Every database lives under the test's `tmp_path`; dispose engines afterwards.
- Go through the public boundary (`bridge`, `build_context`) where possible.
- Marked 'integration' by the root conftest hook.
"""
