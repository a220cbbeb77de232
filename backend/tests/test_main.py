from moodchat.db import Database
from moodchat.services.sentiment_responder import OpenAISentimentResponder


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_db_health(client):
    assert client.get("/db-health").json() == {"db": "ok", "result": 1}


def test_app_state_is_injected(app, responder):
    assert isinstance(app.state.database, Database)
    assert app.state.responder is responder


def test_default_responder_is_openai(tmp_path):
    from moodchat.main import create_app

    app = create_app(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    assert isinstance(app.state.responder, OpenAISentimentResponder)


def test_run_starts_uvicorn(monkeypatch):
    from moodchat import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9001")

    main.run()

    assert calls == [("moodchat.main:app", {"host": "0.0.0.0", "port": 9001})]
