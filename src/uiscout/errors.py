"""Exception hierarchy for discovery, synthesis and execution.

Element-level and pattern-level failures are handled where they occur and never
surface here. The exceptions below are the ones that cross component boundaries.
"""

from typing import Any, Optional


class UIScoutError(Exception):
    """Base exception for uiscout."""

    pass


class PageUnavailableError(UIScoutError):
    """Raised when the page, its context or the browser is gone.

    CRITICAL: Scanners must never swallow this. It aborts the discovery fan-out.
    """

    pass


class UnknownActionError(UIScoutError):
    """Raised when a test step names an action the executor cannot dispatch."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class UnknownAssertionError(UIScoutError):
    """Raised when an assertion type has no verifier."""

    def __init__(self, assertion_type: str):
        self.assertion_type = assertion_type
        super().__init__(f"Unknown assertion type: {assertion_type}")


class StepExecutionError(UIScoutError):
    """Raised when a test step fails against the page."""

    def __init__(self, step: Any, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"Step '{step.description}' failed: {cause}")


class AssertionFailedError(UIScoutError):
    """Raised when an assertion does not hold."""

    def __init__(
        self,
        assertion: Any,
        actual: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        self.assertion = assertion
        self.actual = actual
        detail = message or (
            f"expected {assertion.expected!r}, got {actual!r}"
            if assertion.expected is not None
            else f"got {actual!r}"
        )
        super().__init__(f"Assertion '{assertion.description}' failed: {detail}")
