from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Integer, String, Text, DateTime, CheckConstraint, ForeignKey, Index
)
from sqlalchemy.sql import func

from moodchat.db import Base


class Mood(str, Enum):
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    STRESSED = "Stressed"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    ANGRY = "Angry"


# 추이 그래프용 수치 (높을수록 긍정)
MOOD_VALUES: dict[Mood, float] = {
    Mood.HAPPY: 5,
    Mood.NEUTRAL: 3,
    Mood.STRESSED: 2,
    Mood.ANXIOUS: 1.5,
    Mood.SAD: 1,
    Mood.ANGRY: 1,
}

MOOD_LABELS = tuple(m.value for m in Mood)
_MOOD_SQL_LIST = ",".join(f"'{label}'" for label in MOOD_LABELS)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    chats: Mapped[list["ChatMessage"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    moods: Mapped[list["MoodEntry"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class ChatMessage(Base):
    __tablename__ = "chats"
    __table_args__ = (
        CheckConstraint("role in ('user','bot')", name="ck_chats_role"),
        CheckConstraint(
            f"mood is null or (role = 'bot' and mood in ({_MOOD_SQL_LIST}))",
            name="ck_chats_mood",
        ),
        Index("idx_chats_user_timestamp", "user_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String, nullable=False)   # 'user' | 'bot'
    content: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="chats")


class MoodEntry(Base):
    __tablename__ = "moods"
    __table_args__ = (
        CheckConstraint(f"mood in ({_MOOD_SQL_LIST})", name="ck_moods_mood"),
        Index("idx_moods_user_timestamp", "user_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    mood: Mapped[str] = mapped_column(String, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="moods")
