from __future__ import annotations
from typing import Optional

from fastapi import HTTPException, status


class MoodChatError(HTTPException):
    """
    서비스 계층에서 던지는 에러의 공통 부모.
    HTTPException을 그대로 상속하므로 FastAPI가 {"detail": ...} 형태로 응답합니다.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail)


class DuplicateEmail(MoodChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Email already registered"


class InvalidCredentials(MoodChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class Unauthenticated(MoodChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class InvalidSession(MoodChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid session"


class ResponderFailure(MoodChatError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Sentiment responder failed"


class StorageFailure(MoodChatError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage failure"
