"""
General error handling for dbcontainers.

This module provides error categorization and the exception hierarchy raised
while customizing requests and launching containers. Failures of the container
client itself are wrapped, never swallowed, so callers can catch a single base
class.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(Enum):
    """Types of errors that can occur in the system."""

    VALIDATION_ERROR = "validation_error"  # Invalid option value
    CUSTOMIZATION_ERROR = "customization_error"  # A request customizer failed
    STARTUP_ERROR = "startup_error"  # Container failed to start or become ready
    CONNECTION_ERROR = "connection_error"  # Host/port lookup failed
    CONFIGURATION_ERROR = "configuration_error"  # Configuration issue
    UNKNOWN_ERROR = "unknown_error"  # Unexpected errors


@dataclass
class ErrorDetails:
    """Detailed error information for failed operations."""

    error_type: ErrorType
    error_code: str
    error_message: str
    error_context: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: Optional[str] = None  # Where the error originated

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error details for structured logging."""
        return {
            "error_type": self.error_type.value,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "error_context": self.error_context,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


def create_error_details(
    error_type: ErrorType,
    error_code: str,
    error_message: str,
    error_context: Optional[Dict[str, Any]] = None,
    source: Optional[str] = None,
) -> ErrorDetails:
    """Create error details with default settings."""
    return ErrorDetails(
        error_type=error_type,
        error_code=error_code,
        error_message=error_message,
        error_context=error_context or {},
        source=source,
    )


class DbContainersError(Exception):
    """Base class for all dbcontainers exceptions."""

    error_type = ErrorType.UNKNOWN_ERROR
    error_code = "DBC_000"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.details = create_error_details(
            self.error_type, self.error_code, message, context, source
        )


class InvalidOptionError(DbContainersError):
    """Raised when an option cannot be applied to a request."""

    error_type = ErrorType.VALIDATION_ERROR
    error_code = "DBC_001"


class CustomizeError(DbContainersError):
    """Raised when a request customizer fails."""

    error_type = ErrorType.CUSTOMIZATION_ERROR
    error_code = "DBC_002"


class ContainerStartError(DbContainersError):
    """Raised when a container fails to start or never becomes ready."""

    error_type = ErrorType.STARTUP_ERROR
    error_code = "DBC_003"


class ConnectionInfoError(DbContainersError):
    """Raised when the host or mapped port of a container cannot be resolved."""

    error_type = ErrorType.CONNECTION_ERROR
    error_code = "DBC_004"
