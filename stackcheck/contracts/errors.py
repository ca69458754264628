"""
Errors - Exception taxonomy for layering and reachability verification.

- ConfigurationError: the LayeringPlan (or its stride) is invalid
- AmbiguousBandError: two rules place one element in different bands
- DocumentUnavailableError: the rendered document is detached or timed out
- RemediationError: remediation could not make a control reachable
"""

from typing import Any, List, Optional


class StackcheckError(Exception):
    """Base exception for all stackcheck errors."""
    pass


class ConfigurationError(StackcheckError):
    """Raised when a LayeringPlan or its settings cannot be honoured."""
    pass


class AmbiguousBandError(ConfigurationError):
    """Raised when rules matching one element disagree on its band."""

    def __init__(self, element: Any, selectors: List[str], bands: List[str]):
        self.element = element
        self.selectors = selectors
        self.bands = bands
        super().__init__(
            f"{element} matches rules {selectors} resolving to different bands {bands}"
        )


class DocumentUnavailableError(StackcheckError):
    """Raised when the document handle is detached or a render wait times out."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RemediationError(StackcheckError):
    """Raised for hard remediation failures and disallowed recursive remediation."""

    def __init__(self, message: str, records: Optional[List[Any]] = None):
        super().__init__(message)
        self.records = records or []
