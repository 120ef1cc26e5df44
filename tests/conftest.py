"""
Shared fixtures for the API tests.

The Supabase client is replaced by FakeSupabase, which records the query
builder chain and answers execute() from per-table queued responses. LLM
providers are replaced by StubProvider instances.
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.dependencies import get_current_user, get_user_db
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache
from app.modules.ideas.routes import get_idea_generator
from app.modules.ideas.service import IdeaGenerator
from app.modules.profiles.routes import get_admin_client

TEST_USER = {
    "id": "user-1",
    "email": "ada@example.com",
    "user_metadata": {"full_name": "Ada Lovelace"},
    "app_metadata": {},
    "created_at": "2024-01-01T00:00:00+00:00",
    "updated_at": None,
}

AUTH_HEADERS = {"Authorization": "Bearer test-token"}


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.ops: List[tuple] = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        self.db.queries.append(self)
        queue = self.db.responses.get(self.table) or []
        if not queue:
            return SimpleNamespace(data=[], count=0)
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def op(self, name: str) -> Optional[tuple]:
        for op in self.ops:
            if op[0] == name:
                return op
        return None


class FakeSupabase:
    def __init__(self):
        self.responses: Dict[str, List[Any]] = {}
        self.queries: List[FakeQuery] = []
        self.auth = MagicMock()
        self.postgrest = MagicMock()

    def respond(self, table: str, data: Any = None, count: Optional[int] = None, error: Optional[Exception] = None):
        if error is not None:
            self.responses.setdefault(table, []).append(error)
        else:
            self.responses.setdefault(table, []).append(SimpleNamespace(data=data, count=count))
        return self

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def queries_for(self, table: str) -> List[FakeQuery]:
        return [q for q in self.queries if q.table == table]


class StubProvider:
    """Stands in for an LLM provider: returns queued texts or raises queued errors."""

    def __init__(self, name: str, *outputs):
        self.name = name
        self.outputs = list(outputs)
        self.prompts: List[str] = []

    async def complete(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        output = self.outputs.pop(0) if len(self.outputs) > 1 else self.outputs[0]
        if isinstance(output, Exception):
            raise output
        return output


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def settings_override():
    """Set settings attributes for one test and restore them afterwards."""
    original = {}

    def apply(**values):
        for key, value in values.items():
            original.setdefault(key, getattr(settings, key))
            setattr(settings, key, value)

    yield apply
    for key, value in original.items():
        setattr(settings, key, value)


@pytest.fixture
def client(db):
    limiter.enabled = False
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_user_db] = lambda: db
    app.dependency_overrides[get_admin_client] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def use_generator():
    """Install an IdeaGenerator built from stub providers for the request."""
    def install(openai=None, gemini=None) -> IdeaGenerator:
        generator = IdeaGenerator(openai, gemini)
        app.dependency_overrides[get_idea_generator] = lambda: generator
        return generator
    return install
