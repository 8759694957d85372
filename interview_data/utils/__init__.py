"""Utility modules for the Interview Data client."""

from .logging import setup_logging, get_logger, set_correlation_id, get_correlation_id
from .exceptions import (
    InterviewDataError,
    ConfigurationError,
    BackendNotConnectedError,
    RemoteBackendError,
    RemoteQueryError,
    RemoteWriteError,
    BackendConnectionError,
    MalformedRecordError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "InterviewDataError",
    "ConfigurationError",
    "BackendNotConnectedError",
    "RemoteBackendError",
    "RemoteQueryError",
    "RemoteWriteError",
    "BackendConnectionError",
    "MalformedRecordError",
]
