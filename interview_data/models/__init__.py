"""Data models for the Interview Data client."""

from .base import BaseModel, Record
from .enums import DifficultyLevel, QuestionType, SessionStatus
from .interview import (
    DEFAULT_SESSION_NAME,
    DEFAULT_TOTAL_QUESTIONS,
    InterviewAnswer,
    InterviewQuestion,
    InterviewSession,
    TranscriptEntry,
    UserSession,
)
from .job import JobRole

__all__ = [
    "BaseModel",
    "Record",
    "DifficultyLevel",
    "QuestionType",
    "SessionStatus",
    "DEFAULT_SESSION_NAME",
    "DEFAULT_TOTAL_QUESTIONS",
    "InterviewAnswer",
    "InterviewQuestion",
    "InterviewSession",
    "TranscriptEntry",
    "UserSession",
    "JobRole",
]
