"""Interview session, question and answer models for the Interview Data client."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .base import Record
from .enums import DifficultyLevel, QuestionType, SessionStatus

DEFAULT_SESSION_NAME = "Interview Session"
DEFAULT_TOTAL_QUESTIONS = 5
DEFAULT_TIME_LIMIT_SECONDS = 120


class InterviewSession(Record):
    """A row of ``interview_sessions``."""

    id: str = Field(..., description="Session identifier")
    user_id: str = Field(..., description="Owning user")
    job_role_id: str = Field(..., description="Job role the session practices for")
    resume_id: Optional[str] = Field(None, description="Resume used to tailor the session")
    session_name: str = Field(..., description="Display name")
    session_type: str = Field("practice", description="practice, assessment or mock")
    status: SessionStatus = Field(..., description="Session status")
    total_questions: int = Field(..., description="Number of questions planned")
    questions_answered: int = Field(0, description="Number of questions answered so far")
    difficulty_level: DifficultyLevel = Field(..., description="Session difficulty")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    @field_validator("session_type", mode="before")
    @classmethod
    def default_session_type(cls, v):
        return "practice" if v is None else v

    @field_validator("questions_answered", mode="before")
    @classmethod
    def default_questions_answered(cls, v):
        return 0 if v is None else v


class InterviewQuestion(Record):
    """A row of ``interview_questions``."""

    id: str = Field(..., description="Question identifier")
    job_role_id: str = Field(..., description="Job role the question belongs to")
    question_text: str = Field(..., description="Question text")
    difficulty_level: DifficultyLevel = Field(..., description="Question difficulty")
    is_active: bool = Field(..., description="Whether the question is in rotation")
    question_type: Optional[QuestionType] = Field(None, description="Question category")
    expected_answer_keywords: Optional[List[str]] = Field(None, description="Keywords a good answer mentions")
    sample_answer: Optional[str] = Field(None, description="Reference answer")
    time_limit_seconds: int = Field(DEFAULT_TIME_LIMIT_SECONDS, description="Answer time limit")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator("time_limit_seconds", mode="before")
    @classmethod
    def default_time_limit(cls, v):
        return DEFAULT_TIME_LIMIT_SECONDS if v is None else v


class InterviewAnswer(Record):
    """A row of ``interview_answers``. Answers are append-only."""

    id: str = Field(..., description="Backend-assigned answer identifier")
    session_id: str = Field(..., description="Session the answer belongs to")
    question_id: str = Field(..., description="Question being answered")
    answer_text: str = Field(..., description="Answer text")
    created_at: Optional[datetime] = Field(None, description="Insertion timestamp")


class TranscriptEntry(InterviewAnswer):
    """An answer joined with the text of the question it answers."""

    question_text: str = Field(..., description="Text of the answered question")

    @classmethod
    def from_row(cls, row: Any) -> "TranscriptEntry":
        """Flatten the embedded ``question`` object of a transcript row."""
        if isinstance(row, Mapping):
            row = dict(row)
            embedded = row.pop("question", None)
            if isinstance(embedded, Mapping) and "question_text" in embedded:
                row.setdefault("question_text", embedded["question_text"])
        return super().from_row(row)


class UserSession(InterviewSession):
    """A session listed for its user, with the title and category of its job role."""

    job_role_title: str = Field(..., description="Title of the session's job role")
    job_role_category: Optional[str] = Field(None, description="Category of the session's job role")

    @classmethod
    def from_row(cls, row: Any) -> "UserSession":
        """Flatten the embedded ``job_role`` object of a session row."""
        if isinstance(row, Mapping):
            row = dict(row)
            embedded = row.pop("job_role", None)
            if isinstance(embedded, Mapping):
                row.setdefault("job_role_title", embedded.get("title"))
                row.setdefault("job_role_category", embedded.get("category"))
        return super().from_row(row)
