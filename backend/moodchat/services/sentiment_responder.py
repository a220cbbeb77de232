from __future__ import annotations
import asyncio, json, logging
from dataclasses import dataclass
from typing import List, Dict, Optional, Protocol, Sequence

from fastapi import Request
from openai import OpenAI, OpenAIError

from moodchat import config
from moodchat.errors import ResponderFailure
from moodchat.models import Mood
from moodchat.services.mood_log import coerce_mood

logger = logging.getLogger(__name__)

MAX_TURNS = 12


@dataclass(frozen=True)
class ResponderReply:
    response: str
    mood: Mood


class SentimentResponder(Protocol):
    async def respond(self, latest_message: str, prior_turns: Sequence[Dict[str, str]]) -> ResponderReply:
        ...


def _messages_for_openai(system_prompt: str, latest_message: str, prior_turns: Sequence[Dict[str, str]]):
    messages = [{"role": "system", "content": system_prompt}]
    truncated = list(prior_turns)[-(MAX_TURNS * 2):]
    for turn in truncated:
        role = "assistant" if turn["role"] == "bot" else "user"
        messages.append({"role": role, "content": turn["content"]})
    messages.append({"role": "user", "content": latest_message})
    return messages


def parse_reply(raw: Optional[str]) -> ResponderReply:
    """
    모델 출력(JSON 문자열)을 ResponderReply로 변환.
    response가 없으면 실패, mood는 목록 밖이면 Neutral로 보정합니다.
    """
    if not raw:
        raise ResponderFailure("Sentiment responder returned empty content")
    try:
        data = json.loads(raw.strip())
    except json.JSONDecodeError:
        raise ResponderFailure("Sentiment responder returned malformed output")
    if not isinstance(data, dict):
        raise ResponderFailure("Sentiment responder returned malformed output")
    response = data.get("response")
    if not isinstance(response, str) or not response.strip():
        raise ResponderFailure("Sentiment responder returned no reply")
    return ResponderReply(response=response.strip(), mood=coerce_mood(data.get("mood")))


class OpenAISentimentResponder:
    def __init__(
        self,
        *,
        model: str = config.OPENAI_MODEL,
        timeout: float = config.OPENAI_TIMEOUT_S,
        system_prompt: str = config.SENTIMENT_SYSTEM_PROMPT,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.timeout = timeout
        self.system_prompt = system_prompt
        self._client = client

    @property
    def client(self) -> OpenAI:
        # OPENAI_API_KEY가 없으면 생성자에서 에러가 나므로 첫 호출 때 만듭니다.
        if self._client is None:
            self._client = OpenAI()
        return self._client

    async def respond(self, latest_message: str, prior_turns: Sequence[Dict[str, str]]) -> ResponderReply:
        messages: List[Dict[str, str]] = _messages_for_openai(self.system_prompt, latest_message, prior_turns)

        def _call():
            return self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )

        try:
            resp = await asyncio.to_thread(_call)
            raw = resp.choices[0].message.content
        except (OpenAIError, IndexError, AttributeError) as e:
            logger.error("Sentiment responder call failed: %s", e)
            raise ResponderFailure()
        return parse_reply(raw)


def get_responder(request: Request) -> SentimentResponder:
    return request.app.state.responder
