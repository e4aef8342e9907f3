"""Custom exceptions for CrossQuery.

Update operations raise synchronously at the call site; compilation of a
well-formed criteria never raises.
"""

from typing import Any, Dict


# Base exception
class CrossQueryError(Exception):
    """Base exception for all CrossQuery errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., storage, field, expected)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Validation exceptions
class ValidationError(CrossQueryError):
    """Raised when an input to a criteria or expression node is malformed.

    Example:
        >>> raise ValidationError("Invalid input", field="age")
    """


class InvalidPatchError(ValidationError, TypeError):
    """Raised when an update patch has the wrong shape for its storage.

    Example:
        >>> raise InvalidPatchError("Expected a mapping", storage="facets", got="list")
    """


class InvalidFieldError(ValidationError):
    """Raised when an expression leaf has an invalid field, operator or value.

    Example:
        >>> raise InvalidFieldError("Unsupported range bound", field="age", bound="between")
    """


# Configuration exceptions
class ConfigurationError(CrossQueryError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid configuration", setting="filter_mode", value="xor")
    """


class InvalidConfigError(ConfigurationError):
    """Raised when a join mode or other configuration value is invalid.

    Example:
        >>> raise InvalidConfigError("Invalid join mode", option="query_mode", value="xor")
    """
