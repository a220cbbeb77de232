from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.errors import StorageFailure
from moodchat.models import ChatMessage

logger = logging.getLogger(__name__)


def build_message(user_id: int, role: str, content: str, mood: Optional[str] = None) -> ChatMessage:
    return ChatMessage(user_id=user_id, role=role, content=content, mood=mood)


async def append(
    db: AsyncSession, user_id: int, role: str, content: str, mood: Optional[str] = None
) -> ChatMessage:
    message = build_message(user_id, role, content, mood)
    db.add(message)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to append chat message for user_id=%s", user_id)
        raise StorageFailure()
    await db.refresh(message)
    return message


async def list_messages(db: AsyncSession, user_id: int) -> List[ChatMessage]:
    q = (
        select(ChatMessage)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.timestamp.asc(), ChatMessage.id.asc())
    )
    return list((await db.execute(q)).scalars().all())


async def recent_messages(db: AsyncSession, user_id: int, limit: int) -> List[ChatMessage]:
    """최근 limit개만 최신순으로 읽어서 시간순으로 뒤집어 돌려줍니다."""
    q = (
        select(ChatMessage)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.timestamp.desc(), ChatMessage.id.desc())
        .limit(limit)
    )
    rows = list((await db.execute(q)).scalars().all())
    rows.reverse()
    return rows


async def clear_all(db: AsyncSession, user_id: int) -> int:
    """해당 사용자의 대화 기록을 모두 삭제하고 삭제된 행 수를 돌려줍니다. (복구 불가)"""
    try:
        res = await db.execute(delete(ChatMessage).where(ChatMessage.user_id == user_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to clear chat history for user_id=%s", user_id)
        raise StorageFailure()
    deleted = res.rowcount or 0
    logger.info("Cleared %s chat messages for user_id=%s", deleted, user_id)
    return deleted
