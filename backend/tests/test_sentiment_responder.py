import json
from types import SimpleNamespace

import pytest
from openai import APIConnectionError
import httpx

from moodchat.errors import ResponderFailure
from moodchat.models import Mood
from moodchat.services.sentiment_responder import (
    MAX_TURNS, OpenAISentimentResponder, _messages_for_openai, parse_reply
)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_parse_reply_normalises_mood():
    reply = parse_reply(json.dumps({"response": " Sounds rough. ", "mood": "stressed"}))
    assert reply.response == "Sounds rough."
    assert reply.mood == Mood.STRESSED


def test_parse_reply_coerces_unknown_mood_to_neutral():
    reply = parse_reply(json.dumps({"response": "Okay.", "mood": "Elated"}))
    assert reply.mood == Mood.NEUTRAL


@pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", json.dumps({"mood": "Happy"}), json.dumps({"response": "  "})])
def test_parse_reply_rejects_unusable_output(raw):
    with pytest.raises(ResponderFailure):
        parse_reply(raw)


def test_prior_turns_are_mapped_and_truncated():
    turns = [{"role": "user" if i % 2 == 0 else "bot", "content": str(i)} for i in range(MAX_TURNS * 2 + 4)]
    messages = _messages_for_openai("SYS", "latest", turns)

    assert messages[0] == {"role": "system", "content": "SYS"}
    assert messages[-1] == {"role": "user", "content": "latest"}
    history = messages[1:-1]
    assert len(history) == MAX_TURNS * 2
    assert history[0]["content"] == "4"
    assert {m["role"] for m in history} == {"user", "assistant"}


@pytest.mark.anyio
async def test_openai_responder_returns_reply():
    completions = FakeCompletions(content=json.dumps({"response": "Glad to hear!", "mood": "Happy"}))
    responder = OpenAISentimentResponder(model="test-model", timeout=5, client=fake_client(completions))

    reply = await responder.respond("Great day", [{"role": "bot", "content": "Hi"}])

    assert reply.response == "Glad to hear!"
    assert reply.mood == Mood.HAPPY
    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["timeout"] == 5
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"][1] == {"role": "assistant", "content": "Hi"}


@pytest.mark.anyio
async def test_openai_errors_become_responder_failure():
    error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    responder = OpenAISentimentResponder(client=fake_client(FakeCompletions(error=error)))

    with pytest.raises(ResponderFailure):
        await responder.respond("hello", [])
