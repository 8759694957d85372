"""Enumeration types for the Interview Data client."""

from enum import Enum


class LenientEnum(str, Enum):
    """String-valued enum that also accepts member names in any case."""

    @classmethod
    def _missing_(cls, value):
        """Handle "HARD", "Hard" and "DifficultyLevel.HARD" style values."""
        if isinstance(value, str):
            if value.startswith(f"{cls.__name__}."):
                value = value.split(".", 1)[1]
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    def __str__(self) -> str:
        return self.value


class DifficultyLevel(LenientEnum):
    """Question and session difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionStatus(LenientEnum):
    """Interview session status as stored in ``interview_sessions.status``."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class QuestionType(LenientEnum):
    """Question categories."""

    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    SITUATIONAL = "situational"
    GENERAL = "general"
