from __future__ import annotations
from typing import Optional, Literal, Annotated
from pydantic import AfterValidator, BaseModel, Field, EmailStr, model_validator
from datetime import datetime, timezone

from moodchat.models import Mood

ChatRole = Literal["user", "bot"]


def _as_utc(value: datetime) -> datetime:
    # SQLite는 tzinfo 없이 돌려주므로 저장 시 기준인 UTC를 붙입니다.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDatetime = Annotated[datetime, AfterValidator(_as_utc)]


# 인증
class UserCreate(BaseModel):
    """
    /api/auth/signup 요청 스키마.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    # 형식이 틀린 이메일도 422가 아니라 InvalidCredentials로 떨어지도록 str로 받습니다.
    email: str
    password: str


class UserPublic(BaseModel):
    """
    비밀번호 해시를 제외한 공개 프로필.
    signup / login / me 응답에 공통으로 사용됩니다.
    """
    id: int
    email: str
    name: str

    class Config:
        from_attributes = True


class Ack(BaseModel):
    success: bool = True


class ClearAck(Ack):
    deleted: int


# 대화
class ChatMessageCreate(BaseModel):
    role: ChatRole
    content: str
    mood: Optional[Mood] = None

    @model_validator(mode="after")
    def mood_only_on_bot(self):
        if self.mood is not None and self.role != "bot":
            raise ValueError("mood is only allowed on bot messages")
        return self


class ChatMessageOut(BaseModel):
    id: int
    user_id: int
    role: str
    content: str
    mood: Optional[str] = None
    timestamp: UTCDatetime

    class Config:
        from_attributes = True


class PriorTurn(BaseModel):
    role: ChatRole
    content: str


class ChatTurnReq(BaseModel):
    message: str = Field(..., min_length=1)


class ChatTurnResp(BaseModel):
    response: str
    mood: Mood


# 감정 기록
class MoodCreate(BaseModel):
    mood: Mood


class MoodEntryOut(BaseModel):
    id: int
    user_id: int
    mood: str
    timestamp: UTCDatetime

    class Config:
        from_attributes = True


class TrendPoint(BaseModel):
    timestamp: UTCDatetime
    mood: str
    value: float
