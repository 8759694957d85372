"""Custom exceptions for the Interview Data client."""

from typing import Optional, Any, Dict


class InterviewDataError(Exception):
    """Base exception for all Interview Data client errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(InterviewDataError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "CONFIG_ERROR", details)
        self.config_key = config_key


class BackendNotConnectedError(ConfigurationError):
    """Raised when the backend handle is used before connect() or after close()."""

    def __init__(self, message: str = "Backend connection is not open", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, config_key="backend", details=details)


class RemoteBackendError(InterviewDataError):
    """Base exception for failures reported by the remote backend or its transport."""

    def __init__(
        self,
        message: str,
        error_code: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the remote backend error.

        Args:
            message: Error message
            error_code: Error code for categorization
            table: Optional table the request targeted
            operation: Optional client operation that issued the request
            details: Optional additional error details
        """
        super().__init__(message, error_code, details)
        self.table = table
        self.operation = operation


class RemoteQueryError(RemoteBackendError):
    """Exception raised when a read against the backend fails."""

    def __init__(self, message: str, table: Optional[str] = None, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "REMOTE_QUERY_ERROR", table, operation, details)


class BackendConnectionError(RemoteQueryError):
    """Exception raised when the backend client handle cannot be created."""

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, operation="connect", details=details)
        self.url = url


class RemoteWriteError(RemoteBackendError):
    """Exception raised when an insert against the backend fails."""

    def __init__(self, message: str, table: Optional[str] = None, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "REMOTE_WRITE_ERROR", table, operation, details)


class MalformedRecordError(InterviewDataError):
    """Exception raised when a backend row cannot be converted into a typed record."""

    def __init__(self, message: str, record_type: Optional[str] = None, field_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the malformed record error.

        Args:
            message: Error message
            record_type: Optional name of the record type being built
            field_name: Optional field that was missing or mistyped
            details: Optional additional error details
        """
        super().__init__(message, "MALFORMED_RECORD_ERROR", details)
        self.record_type = record_type
        self.field_name = field_name
