from datetime import datetime, timezone

import pytest

from interview_data.models import (
    DifficultyLevel,
    InterviewAnswer,
    InterviewQuestion,
    InterviewSession,
    JobRole,
    QuestionType,
    SessionStatus,
    TranscriptEntry,
    UserSession,
)
from interview_data.utils.exceptions import MalformedRecordError

ROLE_ROW = {
    "id": "3f1c",
    "title": "Backend Engineer",
    "category": "Engineering",
    "description": None,
    "required_skills": None,
    "experience_levels": ["entry", "mid", "senior"],
    "industry": "Technology",
    "average_salary_range": None,
    "is_active": True,
    "created_at": "2025-01-06T09:00:00.123456+00:00",
    "updated_at": "2025-01-06T09:00:00Z",
}


@pytest.mark.parametrize("value", ["hard", "HARD", "Hard", "DifficultyLevel.HARD", DifficultyLevel.HARD])
def test_difficulty_level_accepts_lenient_spellings(value):
    assert DifficultyLevel(value) is DifficultyLevel.HARD


def test_enums_reject_unknown_values():
    with pytest.raises(ValueError):
        DifficultyLevel("expert")
    with pytest.raises(ValueError):
        SessionStatus(3)


def test_enum_str_is_the_stored_value():
    assert str(SessionStatus.IN_PROGRESS) == "in_progress"
    assert QuestionType("Behavioral") is QuestionType.BEHAVIORAL


def test_job_role_from_row():
    role = JobRole.from_row(ROLE_ROW)

    assert role.title == "Backend Engineer"
    assert role.required_skills == []
    assert role.created_at == datetime(2025, 1, 6, 9, 0, 0, 123456, tzinfo=timezone.utc)
    assert role.updated_at.tzinfo is not None


def test_from_row_ignores_unknown_columns():
    role = JobRole.from_row({**ROLE_ROW, "embedding": [0.1, 0.2]})

    assert "embedding" not in role.to_row()


def test_to_row_keeps_field_order_and_plain_values():
    row = JobRole.from_row(ROLE_ROW).to_row()

    assert list(row)[:3] == ["id", "title", "is_active"]
    assert row["created_at"].startswith("2025-01-06T09:00:00")


@pytest.mark.parametrize("missing", ["id", "title", "is_active"])
def test_missing_required_field_is_malformed(missing):
    row = {k: v for k, v in ROLE_ROW.items() if k != missing}

    with pytest.raises(MalformedRecordError) as exc_info:
        JobRole.from_row(row)

    assert exc_info.value.field_name == missing
    assert exc_info.value.record_type == "JobRole"
    assert exc_info.value.error_code == "MALFORMED_RECORD_ERROR"


def test_mistyped_field_is_malformed():
    row = {
        "id": "s1", "user_id": "u1", "job_role_id": "r1", "session_name": "Mock",
        "status": "scheduled", "total_questions": "five", "difficulty_level": "medium",
    }

    with pytest.raises(MalformedRecordError) as exc_info:
        InterviewSession.from_row(row)

    assert exc_info.value.field_name == "total_questions"
    assert exc_info.value.__cause__ is not None


def test_unknown_status_is_malformed():
    row = {
        "id": "s1", "user_id": "u1", "job_role_id": "r1", "session_name": "Mock",
        "status": "archived", "total_questions": 5, "difficulty_level": "medium",
    }

    with pytest.raises(MalformedRecordError) as exc_info:
        InterviewSession.from_row(row)

    assert exc_info.value.field_name == "status"


def test_non_mapping_row_is_malformed():
    with pytest.raises(MalformedRecordError, match="must be a mapping"):
        InterviewAnswer.from_row(["a1", "s1"])


def test_question_defaults():
    question = InterviewQuestion.from_row({
        "id": "q1",
        "job_role_id": "r1",
        "question_text": "What is a deadlock?",
        "difficulty_level": "medium",
        "question_type": "technical",
        "is_active": True,
        "time_limit_seconds": None,
    })

    assert question.time_limit_seconds == 120
    assert question.question_type is QuestionType.TECHNICAL
    assert question.expected_answer_keywords is None


def test_session_defaults_for_null_columns():
    session = InterviewSession.from_row({
        "id": "s1", "user_id": "u1", "job_role_id": "r1", "resume_id": None,
        "session_name": "Mock", "session_type": None, "status": "in_progress",
        "total_questions": 5, "questions_answered": None, "difficulty_level": "easy",
    })

    assert session.session_type == "practice"
    assert session.questions_answered == 0
    assert session.status is SessionStatus.IN_PROGRESS


def test_transcript_entry_flattens_embedded_question():
    entry = TranscriptEntry.from_row({
        "id": "a1",
        "session_id": "s1",
        "question_id": "q1",
        "answer_text": "Two threads waiting on each other",
        "created_at": "2025-01-06T09:00:05+00:00",
        "question": {"question_text": "What is a deadlock?"},
    })

    assert entry.question_text == "What is a deadlock?"
    assert "question" not in entry.to_row()


def test_user_session_flattens_embedded_job_role():
    session = UserSession.from_row({
        "id": "s1", "user_id": "u1", "job_role_id": "r1",
        "session_name": "Mock", "status": "completed",
        "total_questions": 5, "questions_answered": 5, "difficulty_level": "hard",
        "job_role": {"title": "Data Analyst", "category": None},
    })

    assert session.job_role_title == "Data Analyst"
    assert session.job_role_category is None
    assert "job_role" not in session.to_row()


def test_user_session_without_job_role_is_malformed():
    with pytest.raises(MalformedRecordError) as exc_info:
        UserSession.from_row({
            "id": "s1", "user_id": "u1", "job_role_id": "r1",
            "session_name": "Mock", "status": "completed",
            "total_questions": 5, "difficulty_level": "hard",
            "job_role": None,
        })

    assert exc_info.value.field_name == "job_role_title"
