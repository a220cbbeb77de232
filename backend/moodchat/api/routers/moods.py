from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.db import get_db
from moodchat.schemas import Ack, MoodCreate, MoodEntryOut, TrendPoint
from moodchat.services import mood_log
from moodchat.services.auth_service import CurrentUser, get_current_user

router = APIRouter(prefix="/api/moods", tags=["moods"])


@router.get("", response_model=List[MoodEntryOut])
async def list_moods(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await mood_log.list_moods(db, current_user.id)


@router.post("", response_model=Ack)
async def add_mood(
    mood_in: MoodCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    await mood_log.append(db, current_user.id, mood_in.mood)
    return Ack()


@router.get("/trend", response_model=List[TrendPoint])
async def get_mood_trend(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """감정 기록을 시간순 (timestamp, mood, value) 포인트로 변환해서 돌려줍니다."""
    entries = await mood_log.list_moods(db, current_user.id)
    return mood_log.mood_trend(entries)
