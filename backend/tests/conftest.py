"""
CompareAnything Backend — Shared Test Fixtures

Provides mocked versions of external services (LLM, Supabase)
for deterministic, fast unit tests.
"""

import copy
import json
import os
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport

# Ensure compare_anything is importable without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


# -----------------------------------------------------------------------------
# Environment Setup (before importing app modules)
# -----------------------------------------------------------------------------

os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")
os.environ.setdefault("PUBLIC_BASE_URL", "https://compare.test")
os.environ.setdefault("COMPARE_RATE_LIMIT", "1000/minute")


# -----------------------------------------------------------------------------
# Mock Response Classes
# -----------------------------------------------------------------------------


@dataclass
class MockLLMMessage:
    """Mock message from LLM response."""
    content: Optional[str]


@dataclass
class MockLLMChoice:
    """Mock choice from LLM response."""
    message: MockLLMMessage


@dataclass
class MockLLMUsage:
    """Mock usage stats from LLM response."""
    total_tokens: int = 100
    prompt_tokens: int = 50
    completion_tokens: int = 50


@dataclass
class MockLLMResponse:
    """Mock LLM completion response."""
    choices: list[MockLLMChoice]
    usage: MockLLMUsage = None

    def __post_init__(self):
        if self.usage is None:
            self.usage = MockLLMUsage()


def create_mock_llm_response(content: Optional[str]) -> MockLLMResponse:
    """Create a mock LLM response with given content."""
    return MockLLMResponse(
        choices=[MockLLMChoice(message=MockLLMMessage(content=content))]
    )


# -----------------------------------------------------------------------------
# Fake Supabase (in-memory, supports the query chains db.py uses)
# -----------------------------------------------------------------------------


class FakeSupabaseError(Exception):
    pass


@dataclass
class FakeAPIResponse:
    data: Any


class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self._store = store
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload: dict | None = None
        self._filters: list[tuple[str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None
        self._single = False

    def select(self, columns: str = "*") -> "FakeQuery":
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, data: dict) -> "FakeQuery":
        self._op = "insert"
        self._payload = data
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    def maybe_single(self) -> "FakeQuery":
        self._single = True
        return self

    def execute(self) -> Optional[FakeAPIResponse]:
        self._store.calls.append((self._op, self._table, self._columns, self._limit))
        if self._op in self._store.fail_on:
            raise FakeSupabaseError("connection refused")
        rows = self._store.tables.setdefault(self._table, [])

        if self._op == "insert":
            row = self._store.make_row(self._payload)
            rows.append(row)
            return FakeAPIResponse(data=[copy.deepcopy(row)])

        matched = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]
        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r[column], reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        if self._columns != "*":
            wanted = [c.strip() for c in self._columns.split(",")]
            matched = [{c: r.get(c) for c in wanted} for r in matched]
        matched = copy.deepcopy(matched)

        if self._single:
            # supabase-py v2 returns None from maybe_single() when no rows match
            return FakeAPIResponse(data=matched[0]) if matched else None
        return FakeAPIResponse(data=matched)


@dataclass
class FakeSupabase:
    tables: dict[str, list[dict]] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)
    clock: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def make_row(self, data: dict) -> dict:
        """What the database adds on insert: id and created_at."""
        self.clock += timedelta(seconds=1)
        return {
            "id": str(uuid.uuid4()),
            "created_at": self.clock.isoformat(),
            **copy.deepcopy(data),
        }

    def seed(self, **data) -> dict:
        """Insert a row directly, bypassing the API."""
        row = self.make_row({"template": None, "tone": None, "criteria": None, "result": {}, **data})
        self.tables.setdefault("comparisons", []).append(row)
        return row

    def queries(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "select"]


# -----------------------------------------------------------------------------
# Mock Data Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def sample_result() -> dict:
    """A complete, well-formed ComparisonResult as the model would return it."""
    return {
        "summary": "Two sensible hatchbacks with different strengths.",
        "aspects": [
            {"name": "Reliability", "itemA": "Legendary", "itemB": "Very good"},
            {"name": "Running costs", "itemA": "Low", "itemB": "Moderate"},
            {"name": "Driving feel", "itemA": "Appliance-like", "itemB": "Engaging"},
        ],
        "prosA": ["Cheap to fix", "Holds value"],
        "consA": ["High mileage", "Dated interior"],
        "prosB": ["Lower mileage", "Better to drive"],
        "consB": ["Pricier parts"],
        "verdict": "The Mazda, unless budget is everything.",
        "funTitle": "Sensible Shoes vs Running Shoes",
    }


# -----------------------------------------------------------------------------
# LLM Mocking Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_llm_text(monkeypatch):
    """
    Factory fixture to mock litellm with raw completion text.

    Usage:
        def test_example(mock_llm_text):
            mock = mock_llm_text("not json")
    """
    def _create_mock(content: Optional[str]):
        async def mock_acompletion(*args, **kwargs) -> MockLLMResponse:
            return create_mock_llm_response(content)

        mock = AsyncMock(side_effect=mock_acompletion)
        monkeypatch.setattr("litellm.acompletion", mock)
        return mock

    return _create_mock


@pytest.fixture
def mock_llm_with_response(mock_llm_text):
    """Factory fixture to mock LLM with a JSON-encoded response."""
    def _create_mock(response_data: Any):
        return mock_llm_text(json.dumps(response_data))

    return _create_mock


@pytest.fixture
def mock_llm_failure(monkeypatch):
    """Mock LLM to simulate the provider failing."""
    async def mock_acompletion(*args, **kwargs):
        raise Exception("Invalid API key")

    mock = AsyncMock(side_effect=mock_acompletion)
    monkeypatch.setattr("litellm.acompletion", mock)
    return mock


# -----------------------------------------------------------------------------
# Database Mocking Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_db(monkeypatch) -> FakeSupabase:
    """
    Replace the Supabase client with an in-memory fake.

    Returns the fake so tests can seed rows, inspect calls, or set fail_on.
    """
    fake = FakeSupabase()
    monkeypatch.setattr("compare_anything.db.get_supabase", lambda: fake)
    return fake


@pytest.fixture(autouse=True)
def reset_db_state():
    """Reset db module state before each test."""
    import compare_anything.db as db_module
    db_module._supabase = None
    db_module._persist_failures = 0
    yield
    db_module._supabase = None
    db_module._persist_failures = 0


# -----------------------------------------------------------------------------
# HTTP Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
async def client():
    """Async HTTP client for testing FastAPI endpoints."""
    from compare_anything.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
