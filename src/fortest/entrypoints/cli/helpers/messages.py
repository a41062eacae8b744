"""Terminal message helpers for the FORTEST CLI.

Small helpers for rendering user-visible status lines with emoji→ASCII
fallbacks. They write to stderr so the reporter output on stdout stays
clean when piped.
"""

import click


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr.

    Queried on every call, since the stream can be swapped between calls
    (e.g. under a test runner).
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(emoji: str, fallback: str) -> str:
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Warning marker: ⚠️ when stderr can encode it, otherwise [!]."""
    return _glyph("⚠️", "[!]")  # pragma: no mutate


def success_glyph() -> str:
    """Success marker: ✅ when stderr can encode it, otherwise [OK]."""
    return _glyph("✅", "[OK]")  # pragma: no mutate


def error_glyph() -> str:
    """Error marker: ❌ when stderr can encode it, otherwise [X]."""
    return _glyph("❌", "[X]")  # pragma: no mutate


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr**.

    Example:
        ``⚠️  Results are not persisted (FORTEST_DB_URL is not set).``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr**.

    Example:
        ``✅  math_suite: PASS (4 tests)``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr**.

    Example:
        ``❌  io_suite: FAIL (1 of 3 tests failed)``
    """
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
