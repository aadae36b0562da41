"""Pytest configuration and shared fixtures.

Environment variables are set before any application module is imported so
the settings object and engine pick up test values.
"""

import os

os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from autoreply.db.crud import comments as crud_comments
from autoreply.db.crud import profiles as crud_profiles
from autoreply.db.database import Base
from autoreply.models.db import comments as comment_models, profiles as profile_models  # noqa: F401
from autoreply.models.domain.enums import Platform
from autoreply.services.llm_client import ChatCompletionClient

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def completion(content, finish_reason="stop", refusal=None):
    """Builds an object shaped like an OpenAI chat completion response."""
    message = SimpleNamespace(content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


def openai_request():
    return httpx.Request("POST", OPENAI_URL)


class FakeCompletions:
    """
    Stands in for ``AsyncOpenAI().chat.completions``.

    Answers are routed by the system prompt so tests do not depend on call
    order. Each answer is either response content or an exception to raise.
    """

    def __init__(self, sentiment='{"sentiment": "neutral", "score": 0.5}', lead='{"is_lead": false, "temperature": "cold"}', reply="Thanks a lot!"):
        self.answers = {"sentiment": sentiment, "lead": lead, "reply": reply}
        self.calls = []

    def _route(self, messages):
        system = messages[0]["content"]
        if "sentiment analyzer" in system:
            return "sentiment"
        if "sales lead" in system:
            return "lead"
        return "reply"

    async def create(self, model, messages, **params):
        kind = self._route(messages)
        self.calls.append({"kind": kind, "model": model, "messages": messages, **params})
        answer = self.answers[kind]
        if isinstance(answer, BaseException):
            raise answer
        if isinstance(answer, SimpleNamespace):
            return answer
        return completion(answer)

    def calls_of(self, kind):
        return [call for call in self.calls if call["kind"] == kind]


class FakeOpenAI:
    def __init__(self, completions: FakeCompletions):
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def completions():
    return FakeCompletions()


@pytest.fixture
def llm(completions):
    return ChatCompletionClient(model="gpt-test", client=FakeOpenAI(completions))


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def profile(db_session):
    """Default settings and brand voice for user_1."""
    db_settings, db_brand_voice = await crud_profiles.create_default_profile(db_session, "user_1", brand_name="Sfiya Studio")
    await db_session.commit()
    return db_settings, db_brand_voice


@pytest.fixture
async def make_comment(db_session):
    async def _make(comment_id="comment_1", text="I love this!!", platform=Platform.INSTAGRAM, user_id="user_1"):
        db_comment = await crud_comments.create_comment(db_session, comment_id, user_id, platform, text)
        await db_session.commit()
        return db_comment

    return _make
