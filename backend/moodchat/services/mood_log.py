from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.errors import StorageFailure
from moodchat.models import Mood, MoodEntry, MOOD_VALUES
from moodchat.schemas import TrendPoint

logger = logging.getLogger(__name__)

_LABELS_BY_LOWER = {m.value.lower(): m for m in Mood}


def parse_mood(label: Optional[str]) -> Optional[Mood]:
    """대소문자/공백을 무시하고 Mood로 변환. 목록에 없으면 None."""
    if not isinstance(label, str):
        return None
    return _LABELS_BY_LOWER.get(label.strip().lower())


def coerce_mood(label: Optional[str], default: Mood = Mood.NEUTRAL) -> Mood:
    mood = parse_mood(label)
    if mood is None:
        logger.warning("Unknown mood label %r coerced to %s", label, default.value)
        return default
    return mood


def build_entry(user_id: int, mood: Mood) -> MoodEntry:
    return MoodEntry(user_id=user_id, mood=Mood(mood).value)


async def append(db: AsyncSession, user_id: int, mood: Mood) -> MoodEntry:
    entry = build_entry(user_id, mood)
    db.add(entry)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to append mood entry for user_id=%s", user_id)
        raise StorageFailure()
    await db.refresh(entry)
    return entry


async def list_moods(db: AsyncSession, user_id: int) -> List[MoodEntry]:
    q = (
        select(MoodEntry)
        .where(MoodEntry.user_id == user_id)
        .order_by(MoodEntry.timestamp.asc(), MoodEntry.id.asc())
    )
    return list((await db.execute(q)).scalars().all())


def mood_trend(entries: Iterable[MoodEntry]) -> List[TrendPoint]:
    points = []
    for entry in entries:
        mood = parse_mood(entry.mood)
        value = MOOD_VALUES[mood] if mood is not None else MOOD_VALUES[Mood.NEUTRAL]
        points.append(TrendPoint(timestamp=entry.timestamp, mood=entry.mood, value=value))
    return points
