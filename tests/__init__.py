"""FORTEST test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : The results store and whole sessions against real SQLite files.
- e2e/          : The `fortest` CLI invoked through Click's CliRunner.
- fixtures/     : Shared pytest fixtures, loaded via `pytest_plugins`.
- helpers/      : Shared utilities (no tests here).

General guidance
- Keep unit fast and deterministic; record callbacks with `helpers.call_log`
  rather than mocking the domain.
- Integration uses file-backed SQLite under `tmp_path`.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, integration, e2e, property.
"""
