"""Typed async data access for an interview-practice backend."""

from .services import BackendConnection, ConfigurationManager, InterviewDataClient

__version__ = "0.1.0"

__all__ = ["BackendConnection", "ConfigurationManager", "InterviewDataClient", "__version__"]
