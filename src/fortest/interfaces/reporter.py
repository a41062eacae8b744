"""Reporter interface.

A reporter is the narrow output collaborator of the framework. Everything
that prints test progress or assertion results depends on this contract and
never on a concrete console type.

Well-known tags are ``PASS``, ``FAIL``, ``INFO``, ``TRUE`` and ``FALSE``.
Implementations must accept any other tag as plain text.
"""

import abc

# pylint: disable=too-few-public-methods

PASS = "PASS"
FAIL = "FAIL"
INFO = "INFO"
TRUE = "TRUE"
FALSE = "FALSE"


class Reporter(abc.ABC):
    """Contract for the reporting collaborator."""

    @abc.abstractmethod
    def log(self, message: str, tag: str, border: str | None = None) -> None:
        """Report a single message.

        Args:
            message: Human-readable text.
            tag: Category of the message (e.g. ``"PASS"``, ``"FAIL"``, ``"INFO"``).
            border: Optional decoration printed around the message.
        """
