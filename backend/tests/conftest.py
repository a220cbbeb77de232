import os

os.environ.setdefault("SECRET_KEY", "test-secret")

from typing import Dict, List, Sequence

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from moodchat.errors import ResponderFailure
from moodchat.main import create_app
from moodchat.models import Mood
from moodchat.services.sentiment_responder import ResponderReply


class FakeResponder:
    def __init__(self):
        self.reply = ResponderReply(response="I hear you.", mood=Mood.SAD)
        self.fail = False
        self.calls: List[tuple] = []

    async def respond(self, latest_message: str, prior_turns: Sequence[Dict[str, str]]) -> ResponderReply:
        self.calls.append((latest_message, list(prior_turns)))
        if self.fail:
            raise ResponderFailure()
        return self.reply


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def responder():
    return FakeResponder()


@pytest.fixture
def app(tmp_path, responder):
    return create_app(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", responder=responder)


@pytest.fixture
def client(app):
    # secure 쿠키가 다시 전송되도록 https로 요청합니다.
    with TestClient(app, base_url="https://testserver") as c:
        yield c


def signup(client, email="a@x.com", password="pw", name="A"):
    return client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})


def login(client, email="a@x.com", password="pw"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def count_rows(client, model, **filters) -> int:
    async def _count():
        async with client.app.state.database.sessionmaker() as db:
            q = select(func.count()).select_from(model)
            for column, value in filters.items():
                q = q.where(getattr(model, column) == value)
            return (await db.execute(q)).scalar_one()

    return client.portal.call(_count)
