"""Typed data access for job roles, interview sessions, questions and answers.

Every public method issues exactly one request through the injected Supabase
client and converts the rows it gets back into typed records. Failures are
logged here and then raised as :class:`RemoteQueryError` (reads) or
:class:`RemoteWriteError` (inserts) chained to the original exception. Nothing
is cached and nothing is retried.
"""

import time
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar, Union

from supabase import AsyncClient

from ..models.base import Record
from ..models.enums import DifficultyLevel, QuestionType, SessionStatus
from ..models.interview import (
    DEFAULT_SESSION_NAME,
    DEFAULT_TOTAL_QUESTIONS,
    InterviewQuestion,
    InterviewSession,
    TranscriptEntry,
    UserSession,
)
from ..models.job import JobRole
from ..utils.exceptions import MalformedRecordError, RemoteBackendError, RemoteQueryError, RemoteWriteError
from ..utils.logging import get_logger, log_performance

JOB_ROLES_TABLE = "job_roles"
SESSIONS_TABLE = "interview_sessions"
QUESTIONS_TABLE = "interview_questions"
ANSWERS_TABLE = "interview_answers"

TRANSCRIPT_COLUMNS = "*, question:interview_questions(question_text)"
# Sessions whose job role was deleted (job_role_id set to NULL) drop out of the inner join
USER_SESSION_COLUMNS = "*, job_role:job_roles!inner(title, category)"

RecordT = TypeVar("RecordT", bound=Record)


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class InterviewDataClient:
    """Façade over the hosted backend for the interview-practice tables."""

    def __init__(self, client: AsyncClient):
        """Initialize the data client.

        Args:
            client: A connected Supabase async client, usually
                ``BackendConnection.client``. It is shared, never closed here.
        """
        self._client = client
        self.logger = get_logger(__name__)

    async def list_active_job_roles(self) -> List[JobRole]:
        """List active job roles ordered by title.

        Raises:
            RemoteQueryError: If the request fails.
            MalformedRecordError: If a returned row is invalid.
        """
        operation = "list_active_job_roles"
        query = (
            self._client.table(JOB_ROLES_TABLE)
            .select("*")
            .eq("is_active", True)
            .order("title")
        )
        response = await self._execute(query, JOB_ROLES_TABLE, operation, RemoteQueryError)
        return self._to_records(response.data, JobRole, operation)

    async def get_job_role(self, job_role_id: str) -> Optional[JobRole]:
        """Fetch one active job role, or None if it does not exist or is inactive."""
        operation = "get_job_role"
        query = (
            self._client.table(JOB_ROLES_TABLE)
            .select("*")
            .eq("id", job_role_id)
            .eq("is_active", True)
            .limit(1)
        )
        response = await self._execute(query, JOB_ROLES_TABLE, operation, RemoteQueryError)
        roles = self._to_records(response.data, JobRole, operation)
        return roles[0] if roles else None

    async def create_interview_session(
        self,
        user_id: str,
        job_role_id: str,
        resume_id: Optional[str] = None,
        session_name: Optional[str] = None,
        total_questions: int = DEFAULT_TOTAL_QUESTIONS,
        difficulty_level: Union[DifficultyLevel, str] = DifficultyLevel.MEDIUM,
    ) -> InterviewSession:
        """Create a scheduled interview session.

        Args:
            user_id: Owning user.
            job_role_id: Job role the session practices for.
            resume_id: Optional resume to tailor the session to.
            session_name: Display name; "Interview Session" when missing or empty.
            total_questions: Number of questions planned.
            difficulty_level: Session difficulty.

        Returns:
            The inserted session exactly as the backend confirmed it.

        Raises:
            RemoteWriteError: If the insert is rejected, the request fails, or
                the backend does not confirm exactly one row.
            MalformedRecordError: If the confirmed row is invalid.
        """
        operation = "create_interview_session"
        record = {
            "user_id": user_id,
            "job_role_id": job_role_id,
            "resume_id": resume_id,
            "session_name": session_name or DEFAULT_SESSION_NAME,
            "status": SessionStatus.SCHEDULED.value,
            "total_questions": total_questions,
            "difficulty_level": _enum_value(difficulty_level),
        }
        query = self._client.table(SESSIONS_TABLE).insert(record)
        response = await self._execute(query, SESSIONS_TABLE, operation, RemoteWriteError)

        rows = response.data or []
        if len(rows) != 1:
            self.logger.error(
                f"{operation}: backend confirmed {len(rows)} rows instead of one",
                extra={"table": SESSIONS_TABLE, "operation": operation},
            )
            raise RemoteWriteError(
                f"Session insert confirmed {len(rows)} rows instead of one",
                table=SESSIONS_TABLE,
                operation=operation,
            )

        session = self._to_records(rows, InterviewSession, operation)[0]
        self.logger.info(f"Created interview session {session.id} for user {user_id}")
        return session

    async def list_user_sessions(
        self,
        user_id: str,
        status: Optional[Union[SessionStatus, str]] = None,
        limit: Optional[int] = None,
    ) -> List[UserSession]:
        """List a user's sessions with their job role, newest first.

        Sessions left without a job role are not listed. A non-positive
        ``limit`` yields an empty list without a request.
        """
        operation = "list_user_sessions"
        if limit is not None and limit <= 0:
            return []

        query = self._client.table(SESSIONS_TABLE).select(USER_SESSION_COLUMNS).eq("user_id", user_id)
        if status is not None:
            query = query.eq("status", _enum_value(status))
        query = query.order("created_at", desc=True)
        if limit is not None:
            query = query.limit(limit)

        response = await self._execute(query, SESSIONS_TABLE, operation, RemoteQueryError)
        return self._to_records(response.data, UserSession, operation)

    async def list_interview_questions(
        self,
        job_role_id: str,
        difficulty_level: Union[DifficultyLevel, str],
        limit: int,
        question_type: Optional[Union[QuestionType, str]] = None,
    ) -> List[InterviewQuestion]:
        """List up to ``limit`` active questions for a role and difficulty.

        A non-positive ``limit`` yields an empty list without a request.
        ``question_type`` narrows the list to one category of question.

        Raises:
            RemoteQueryError: If the request fails.
            MalformedRecordError: If a returned row is invalid.
        """
        operation = "list_interview_questions"
        if limit <= 0:
            self.logger.debug(f"{operation}: limit {limit} is not positive, returning no questions")
            return []

        query = (
            self._client.table(QUESTIONS_TABLE)
            .select("*")
            .eq("job_role_id", job_role_id)
            .eq("difficulty_level", _enum_value(difficulty_level))
            .eq("is_active", True)
        )
        if question_type is not None:
            query = query.eq("question_type", _enum_value(question_type))
        query = query.limit(limit)

        response = await self._execute(query, QUESTIONS_TABLE, operation, RemoteQueryError)
        return self._to_records(response.data, InterviewQuestion, operation)

    async def count_interview_questions(
        self,
        job_role_id: str,
        difficulty_level: Optional[Union[DifficultyLevel, str]] = None,
        question_type: Optional[Union[QuestionType, str]] = None,
    ) -> int:
        """Count active questions for a role, optionally for one difficulty and type."""
        operation = "count_interview_questions"
        query = (
            self._client.table(QUESTIONS_TABLE)
            .select("id", count="exact")
            .eq("job_role_id", job_role_id)
            .eq("is_active", True)
        )
        if difficulty_level is not None:
            query = query.eq("difficulty_level", _enum_value(difficulty_level))
        if question_type is not None:
            query = query.eq("question_type", _enum_value(question_type))

        response = await self._execute(query, QUESTIONS_TABLE, operation, RemoteQueryError)
        if response.count is not None:
            return response.count
        return len(response.data or [])

    async def save_answer(self, session_id: str, question_id: str, answer_text: str) -> None:
        """Append one answer row. Identical calls store identical, separate rows.

        Raises:
            RemoteWriteError: If the insert is rejected or the request fails.
        """
        operation = "save_answer"
        query = self._client.table(ANSWERS_TABLE).insert({
            "session_id": session_id,
            "question_id": question_id,
            "answer_text": answer_text,
        })
        await self._execute(query, ANSWERS_TABLE, operation, RemoteWriteError)
        self.logger.debug(f"Saved answer to question {question_id} in session {session_id}")

    async def get_interview_transcript(self, session_id: str) -> List[TranscriptEntry]:
        """Return a session's answers with their question text, in creation order.

        Raises:
            RemoteQueryError: If the request fails.
            MalformedRecordError: If a returned row or its joined question is invalid.
        """
        operation = "get_interview_transcript"
        query = (
            self._client.table(ANSWERS_TABLE)
            .select(TRANSCRIPT_COLUMNS)
            .eq("session_id", session_id)
            .order("created_at")
            .order("id")
        )
        response = await self._execute(query, ANSWERS_TABLE, operation, RemoteQueryError)
        return self._to_records(response.data, TranscriptEntry, operation)

    async def _execute(self, query: Any, table: str, operation: str, error_cls: Type[RemoteBackendError]) -> Any:
        """Run one request, logging and wrapping any failure in ``error_cls``."""
        started = time.perf_counter()
        try:
            response = await query.execute()
        except Exception as e:
            self.logger.error(
                f"{operation} failed on {table}: {str(e)}",
                extra={"table": table, "operation": operation},
            )
            raise error_cls(f"{operation} failed: {str(e)}", table=table, operation=operation) from e

        log_performance(operation, time.perf_counter() - started, {"table": table})
        return response

    def _to_records(self, rows: Any, record_cls: Type[RecordT], operation: str) -> List[RecordT]:
        """Convert backend rows, logging before a MalformedRecordError propagates."""
        if rows is None:
            return []
        if not isinstance(rows, list):
            self.logger.error(f"{operation}: expected a list of rows, got {type(rows).__name__}")
            raise MalformedRecordError(
                f"Expected a list of rows, got {type(rows).__name__}",
                record_type=record_cls.__name__,
            )

        try:
            return [record_cls.from_row(row) for row in rows]
        except MalformedRecordError as e:
            self.logger.error(f"{operation}: {e.message}", extra={"operation": operation})
            raise
