from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.db import get_db
from moodchat.schemas import UserCreate, UserLogin, UserPublic, Ack
from moodchat.services.auth_service import (
    CurrentUser, signup, login, create_access_token, set_session_cookie, clear_session_cookie, get_current_user
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserPublic)
async def signup_user(user_in: UserCreate, response: Response, db: AsyncSession = Depends(get_db)):
    user = await signup(db, user_in.email, user_in.password, user_in.name)
    set_session_cookie(response, create_access_token(user))
    return user


@router.post("/login", response_model=UserPublic)
async def login_user(credentials: UserLogin, response: Response, db: AsyncSession = Depends(get_db)):
    user = await login(db, credentials.email, credentials.password)
    set_session_cookie(response, create_access_token(user))
    return user


@router.post("/logout", response_model=Ack)
async def logout_user(response: Response):
    """
    쿠키만 지웁니다. 서버 쪽 상태는 바뀌지 않습니다.
    """
    clear_session_cookie(response)
    return Ack()


@router.get("/me", response_model=UserPublic)
async def get_my_info(current_user: CurrentUser = Depends(get_current_user)):
    return current_user
