"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class FortestError(Exception):
    """Base class for domain-layer errors."""


# ============================================================================
#                   Configuration (registration) errors
# ============================================================================


class ConfigurationError(FortestError):
    """Raised when a registration call is inconsistent with the session state."""


class DuplicateSuiteError(ConfigurationError):
    """Raised when a suite name is registered twice in the same session."""

    def __init__(self, suite_name: str) -> None:
        super().__init__(f"Test suite with name '{suite_name}' already exists in session.")
        self.suite_name = suite_name


class UnknownSuiteError(ConfigurationError):
    """Raised when a suite name is not registered in the session."""

    def __init__(self, suite_name: str) -> None:
        super().__init__(f"Suite '{suite_name}' does not exist in session.")
        self.suite_name = suite_name


class InvalidScopeError(ConfigurationError):
    """Raised when a fixture scope is unknown or not allowed for the call used."""

    def __init__(self, scope: object, reason: str) -> None:
        super().__init__(f"Invalid fixture scope {scope!r}: {reason}")
        self.scope = scope
        self.reason = reason


# ============================================================================
#                           Test body errors
# ============================================================================


class TestBodyError(FortestError):
    """Raised when an error signaled by a test body is surfaced to a caller.

    The original error is chained as ``__cause__``.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, test_name: str, error: BaseException, index: int | None = None) -> None:
        where = test_name if index is None else f"{test_name} [param={index}]"
        super().__init__(f"Test '{where}' raised {type(error).__name__}: {error}")
        self.test_name = test_name
        self.index = index
        self.error = error
