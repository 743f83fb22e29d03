"""RegIntel Custom Exception Hierarchy.

Exception types raised by the data quality engine, the record store
collaborator, and the service wiring around them. Pure engine functions
(similarity, validation, standardization) never raise for bad data; bad
data is reported as a validation finding instead. These exceptions cover
misconfiguration and storage failures.

Exception Hierarchy:
    RegIntelException (base)
    ├── ConfigurationError
    └── DataException
        ├── RecordNotFoundError
        └── DataAccessError

All exceptions include rich context:
- error_code: Unique error identifier
- component: Name of the component that raised the error
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from regintel.exceptions import RecordNotFoundError
    >>> raise RecordNotFoundError(
    ...     message="Regulatory update not found",
    ...     record_type="regulatory_update",
    ...     record_id="42",
    ... )

Author: RegIntel Platform Team
Date: October 2026
Status: Production Ready
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone
import json
import re


# ==============================================================================
# Base Exception
# ==============================================================================

class RegIntelException(Exception):
    """Base exception for all RegIntel errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "RI_DATA_RECORD_NOT_FOUND_ERROR")
        component: Name of the component that raised the error (optional)
        context: Dictionary with error-specific details
        timestamp: When the error occurred (UTC)
    """

    ERROR_PREFIX = "RI"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize RegIntel exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            component: Name of the component that raised the error
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.component = component
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "RI_DATA_DATA_ACCESS_ERROR"
        """
        class_name = self.__class__.__name__
        # CamelCase -> SCREAMING_SNAKE_CASE
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary with all error details
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "component": self.component,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        parts = [f"[{self.error_code}]"]
        if self.component:
            parts.append(f"Component: {self.component}")
        parts.append(self.message)
        return " - ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"component='{self.component}')"
        )


class ConfigurationError(RegIntelException):
    """Service configuration is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="similarity_threshold must be in [0, 1]",
        ...     component="DataQualityService",
        ...     context={"problems": ["similarity_threshold=1.5"]},
        ... )
    """
    ERROR_PREFIX = "RI_CONFIG"


# ==============================================================================
# Data Exceptions
# ==============================================================================

class DataException(RegIntelException):
    """Base exception for record store errors."""
    ERROR_PREFIX = "RI_DATA"


class RecordNotFoundError(DataException):
    """A record addressed by id does not exist in the store.

    Example:
        >>> raise RecordNotFoundError(
        ...     message="Record not found",
        ...     record_type="legal_case",
        ...     record_id="abc",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        record_type: Optional[str] = None,
        record_id: Optional[Any] = None,
    ):
        """Initialize record-not-found error.

        Args:
            message: Error message
            context: Error context
            record_type: Collection the record was looked up in
            record_id: Id that was not found
        """
        context = context or {}
        if record_type:
            context["record_type"] = record_type
        if record_id is not None:
            context["record_id"] = record_id
        super().__init__(message, context=context)


class DataAccessError(DataException):
    """Data access failed.

    Raised when the record store cannot be read or written (network,
    permissions, backend outage).

    Example:
        >>> raise DataAccessError(
        ...     message="Failed to load records",
        ...     data_source="postgres",
        ...     operation="get_all",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        data_source: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize data access error.

        Args:
            message: Error message
            context: Error context
            data_source: Data source that failed
            operation: Operation that failed (get_all, update, delete)
            cause: Original exception
        """
        context = context or {}
        if data_source:
            context["data_source"] = data_source
        if operation:
            context["operation"] = operation
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, RegIntelException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


def is_retriable(exc: Exception) -> bool:
    """Check if exception is retriable.

    Args:
        exc: Exception to check

    Returns:
        True if operation should be retried
    """
    if isinstance(exc, DataAccessError):
        return True
    if isinstance(exc, (ConfigurationError, RecordNotFoundError)):
        return False

    # Unknown exceptions: don't retry by default
    return False


__all__ = [
    "RegIntelException",
    "ConfigurationError",
    "DataException",
    "RecordNotFoundError",
    "DataAccessError",
    "format_exception_chain",
    "is_retriable",
]
