from __future__ import annotations
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.errors import StorageFailure
from moodchat.services import conversation_log, mood_log
from moodchat.services.sentiment_responder import MAX_TURNS, ResponderReply, SentimentResponder

logger = logging.getLogger(__name__)


async def run_turn(db: AsyncSession, responder: SentimentResponder, user_id: int, message: str) -> ResponderReply:
    """
    대화 한 턴 처리.
    1) 이전 대화 로드 2) 사용자 메시지 저장 3) 응답 생성 4) 봇 메시지 + 감정 기록을 한 트랜잭션으로 저장.
    4)가 실패하면 StorageFailure로 올려보냅니다. 2)에서 저장된 사용자 메시지는 남습니다.
    """
    history = await conversation_log.recent_messages(db, user_id, MAX_TURNS * 2)
    prior_turns = [{"role": m.role, "content": m.content} for m in history]

    await conversation_log.append(db, user_id, "user", message)

    reply = await responder.respond(message, prior_turns)

    db.add(conversation_log.build_message(user_id, "bot", reply.response, reply.mood.value))
    db.add(mood_log.build_entry(user_id, reply.mood))
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to persist bot reply for user_id=%s", user_id)
        raise StorageFailure()

    return reply
