"""Command-line interface for FORTEST (``fortest`` console script)."""
