from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat.errors import DuplicateEmail, StorageFailure
from moodchat.models import User

logger = logging.getLogger(__name__)


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def create_user(db: AsyncSession, email: str, password_hash: str, name: str) -> User:
    """
    사용자 한 명을 저장합니다.
    email UNIQUE 제약에 걸리면 롤백 후 DuplicateEmail을 던집니다 (덮어쓰지 않음).
    """
    user = User(email=email, password_hash=password_hash, name=name)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmail()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create user")
        raise StorageFailure()
    await db.refresh(user)
    return user
