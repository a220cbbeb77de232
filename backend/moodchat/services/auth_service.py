import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat import config
from moodchat.errors import DuplicateEmail, InvalidCredentials, InvalidSession, Unauthenticated
from moodchat.models import User
from moodchat.services import user_store

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# 없는 이메일로 로그인할 때도 해시 검증 한 번을 수행하기 위한 더미 해시
_DUMMY_HASH = pwd_context.hash("moodchat-dummy-password")


@dataclass(frozen=True)
class CurrentUser:
    id: int
    email: str
    name: str


def verify_password(plain_password, password_hash):
    return pwd_context.verify(plain_password, password_hash)


def hash_password(password):
    if not isinstance(password, (str, bytes)):
        raise TypeError("Password must be a string or bytes.")
    return pwd_context.hash(password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """
    세션 토큰을 검증해서 {id, email, name}을 돌려줍니다.
    서명/형식/만료/클레임 중 하나라도 잘못되면 InvalidSession.
    """
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise InvalidSession()

    user_id = payload.get("id")
    email = payload.get("email")
    name = payload.get("name")
    if not isinstance(user_id, int) or payload.get("sub") != str(user_id) or email is None or name is None:
        raise InvalidSession()
    return CurrentUser(id=user_id, email=email, name=name)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=True,
        samesite="none",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


async def signup(db: AsyncSession, email: str, password: str, name: str) -> User:
    if await user_store.find_by_email(db, email):
        raise DuplicateEmail()
    user = await user_store.create_user(db, email, hash_password(password), name)
    logger.info("User signed up: id=%s", user.id)
    return user


async def login(db: AsyncSession, email: str, password: str) -> User:
    """
    존재하지 않는 이메일과 틀린 비밀번호는 똑같은 InvalidCredentials로 응답합니다.
    어느 쪽이 틀렸는지 노출하지 않아야 합니다.
    """
    user = await user_store.find_by_email(db, email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed")
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.info("Login failed")
        raise InvalidCredentials()
    logger.info("User logged in: id=%s", user.id)
    return user


async def get_current_user(request: Request) -> CurrentUser:
    """
    보호된 API 앞단의 인증 의존성.
    쿠키의 세션 토큰만 검증하고(DB 조회 없음) request.state.user에 신원을 붙입니다.
    """
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        raise Unauthenticated()
    current_user = decode_access_token(token)
    request.state.user = current_user
    return current_user
