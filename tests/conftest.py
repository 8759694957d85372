"""Shared fixtures: an in-memory stand-in for the Supabase async query builder."""

import asyncio
import itertools
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest

from interview_data.services.interview_data_client import InterviewDataClient

TABLES = ("job_roles", "interview_sessions", "interview_questions", "interview_answers")

# Column defaults the database applies on insert
TABLE_DEFAULTS = {
    "interview_sessions": {"session_type": "practice", "questions_answered": 0},
    "interview_questions": {"is_active": True, "time_limit_seconds": 120},
    "job_roles": {"is_active": True, "required_skills": []},
}

# Foreign key used when a table is embedded as ``alias:table(columns)``
EMBED_KEYS = {"interview_questions": "question_id", "job_roles": "job_role_id"}

EMBED_PATTERN = re.compile(r"(\w+):(\w+)(!inner)?\(([^)]*)\)")

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Records the builder calls and answers them from the backend's tables."""

    def __init__(self, backend: "FakeSupabase", table: str):
        self.backend = backend
        self.table = table
        self.columns = "*"
        self.count_method = None
        self.filters: List[tuple] = []
        self.orders: List[tuple] = []
        self.limit_count: Optional[int] = None
        self.insert_record: Optional[Dict[str, Any]] = None

    def select(self, *columns, count=None):
        self.columns = ",".join(columns) if columns else "*"
        self.count_method = count
        return self

    def insert(self, record):
        self.insert_record = dict(record)
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, *, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, size):
        self.limit_count = size
        return self

    async def execute(self):
        self.backend.requests.append(self)
        await asyncio.sleep(0)
        if self.table in self.backend.failures:
            raise self.backend.failures[self.table]
        if self.insert_record is not None:
            return FakeResponse([self.backend.store(self.table, self.insert_record)])
        return self._select()

    def _select(self) -> FakeResponse:
        inner_tables = [table for _, table, inner, _ in EMBED_PATTERN.findall(self.columns) if inner]
        rows = [
            row for row in self.backend.tables[self.table]
            if all(row.get(column) == value for column, value in self.filters)
            and all(self._embed_target(row, table) is not None for table in inner_tables)
        ]
        for column, desc in reversed(self.orders):
            rows.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)

        count = len(rows) if self.count_method else None
        if self.limit_count is not None:
            rows = rows[:self.limit_count]
        return FakeResponse([self._project(row) for row in rows], count)

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        embeds = EMBED_PATTERN.findall(self.columns)
        plain = [c.strip() for c in EMBED_PATTERN.sub("", self.columns).split(",") if c.strip()]

        projected = dict(row) if "*" in plain else {c: row.get(c) for c in plain}
        for alias, table, _, columns in embeds:
            target = self._embed_target(row, table)
            wanted = [c.strip() for c in columns.split(",")]
            projected[alias] = {c: target.get(c) for c in wanted} if target else None
        return projected

    def _embed_target(self, row: Dict[str, Any], table: str) -> Optional[Dict[str, Any]]:
        target_id = row.get(EMBED_KEYS[table])
        if target_id is None:
            return None
        return next((r for r in self.backend.tables[table] if r["id"] == target_id), None)


class FakeSupabase:
    """Minimal async Supabase client: ``table()`` plus in-memory rows."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self.failures: Dict[str, Exception] = {}
        self.requests: List[FakeQuery] = []
        self._clock = itertools.count()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def store(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(TABLE_DEFAULTS.get(table, {}))
        row.update(record)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", (BASE_TIME + timedelta(seconds=next(self._clock))).isoformat())
        self.tables[table].append(row)
        return dict(row)

    def fail(self, table: str, error: Exception) -> None:
        self.failures[table] = error


@pytest.fixture
def backend() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(backend) -> InterviewDataClient:
    return InterviewDataClient(backend)


@pytest.fixture
def seeded(backend):
    """Two roles (one inactive) and a spread of questions for the active one."""
    backend_role = backend.store("job_roles", {"title": "Backend Engineer", "category": "Engineering"})
    backend.store("job_roles", {"title": "Astronaut", "category": "Space", "is_active": False})
    analyst = backend.store("job_roles", {"title": "Data Analyst", "category": "Data"})

    questions = []
    for index, (difficulty, active) in enumerate([
        ("hard", True), ("hard", True), ("hard", False), ("hard", True),
        ("hard", True), ("medium", True), ("easy", True),
    ]):
        questions.append(backend.store("interview_questions", {
            "job_role_id": backend_role["id"],
            "question_text": f"Question {index}",
            "question_type": "technical",
            "difficulty_level": difficulty,
            "is_active": active,
        }))
    backend.store("interview_questions", {
        "job_role_id": analyst["id"],
        "question_text": "Explain a left join",
        "question_type": "technical",
        "difficulty_level": "hard",
    })

    return {"role": backend_role, "analyst": analyst, "questions": questions}
