"""Service modules for the Interview Data client."""

from .backend import BackendConnection
from .configuration_manager import AppConfig, BackendConfig, ConfigurationManager, LoggingConfig
from .interview_data_client import InterviewDataClient

__all__ = [
    "BackendConnection",
    "AppConfig",
    "BackendConfig",
    "ConfigurationManager",
    "LoggingConfig",
    "InterviewDataClient",
]
