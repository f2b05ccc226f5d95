"""Custom exceptions for the finpath planning engine.

This module provides a hierarchy of exception classes for consistent error
handling across the planner. All exceptions inherit from FinpathError,
making it easy to catch all application-specific errors.

Example:
    try:
        result = planner.plan(raw_profile)
    except ValidationError as e:
        # Bad input: tell the user which field to fix
        return {"error": e.message, "field": e.field}
    except FinpathError as e:
        # Handle any finpath-related error
        logger.error("plan_failed", error=str(e))
"""

from typing import Any, Optional


class FinpathError(Exception):
    """Base exception for all finpath errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(FinpathError):
    """Error raised when a profile or request fails validation.

    Raised before any calculation runs, so no partial plan is ever produced.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Age is out of range",
        ...     field="age",
        ...     value=12,
        ...     constraint="Must be between 18 and 100",
        ... )
        ValidationError: Age is out of range
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True since validation errors typically require
                user input correction.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ComputationError(FinpathError):
    """Error raised when a planning step produces an unusable number.

    Division by zero or a non-finite result means the engine itself is wrong,
    not the input, so this error is never recoverable.

    Attributes:
        step: The planning step that failed (e.g. "retirement_plan").
    """

    def __init__(
        self,
        message: str,
        *,
        step: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.step = step

        if step:
            self.details["step"] = step


class ProviderError(FinpathError):
    """Error raised when an account data provider cannot deliver balances.

    Attributes:
        provider: Name of the provider that failed.
        operation: The operation the provider was attempting.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ProviderError.

        Args:
            message: Human-readable error description.
            provider: Identifier for the provider that encountered the error.
            operation: The specific operation being attempted.
            details: Optional dictionary with additional context.
            recoverable: Whether the operation can be retried. Defaults to True
                since aggregator outages are usually transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.provider = provider
        self.operation = operation

        if provider:
            self.details["provider"] = provider
        if operation:
            self.details["operation"] = operation


class ConfigurationError(FinpathError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "FinpathError",
    "ValidationError",
    "ComputationError",
    "ProviderError",
    "ConfigurationError",
]
