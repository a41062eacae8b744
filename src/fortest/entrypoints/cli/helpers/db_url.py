"""Display form of the results database URL.

``fortest config`` shows where results go without leaking
credentials: the password is replaced by ``***`` and credential-like query
parameters (``?sslpassword=...``) by ``redacted``. ``***`` cannot be used in
the query string, where SQLAlchemy percent-encodes it.
"""

from __future__ import annotations

from sqlalchemy.engine import make_url

SECRET_QUERY_KEYS = frozenset({"password", "passwd", "pwd", "sslpassword", "token", "secret"})
QUERY_MASK = "redacted"


def sanitize_url(url: str) -> str:
    """``url`` with its secrets masked; performs no I/O."""
    parsed = make_url(url)
    secrets = {key: QUERY_MASK for key in parsed.query if key.lower() in SECRET_QUERY_KEYS}
    if secrets:
        parsed = parsed.update_query_dict(secrets)
    return parsed.render_as_string(hide_password=True)
