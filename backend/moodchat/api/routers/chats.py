from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.db import get_db
from moodchat.schemas import Ack, ClearAck, ChatMessageCreate, ChatMessageOut, ChatTurnReq, ChatTurnResp
from moodchat.services import conversation_log
from moodchat.services.auth_service import CurrentUser, get_current_user
from moodchat.services.chat_turn import run_turn
from moodchat.services.sentiment_responder import SentimentResponder, get_responder

router = APIRouter(prefix="/api/chats", tags=["chats"])


@router.get("", response_model=List[ChatMessageOut])
async def list_chats(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await conversation_log.list_messages(db, current_user.id)


@router.post("", response_model=Ack)
async def add_chat(
    message_in: ChatMessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    mood = message_in.mood.value if message_in.mood else None
    await conversation_log.append(db, current_user.id, message_in.role, message_in.content, mood)
    return Ack()


@router.delete("", response_model=ClearAck)
async def clear_chats(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    deleted = await conversation_log.clear_all(db, current_user.id)
    return ClearAck(deleted=deleted)


@router.post("/turn", response_model=ChatTurnResp)
async def chat_turn(
    req: ChatTurnReq,
    db: AsyncSession = Depends(get_db),
    responder: SentimentResponder = Depends(get_responder),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    사용자 메시지 저장 → 응답 생성 → 봇 메시지/감정 저장까지 한 번에 처리합니다.
    """
    reply = await run_turn(db, responder, current_user.id, req.message)
    return ChatTurnResp(response=reply.response, mood=reply.mood)
