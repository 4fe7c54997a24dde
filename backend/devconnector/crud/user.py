"""
CRUD operations for users and their session tokens.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.db.base import utcnow
from devconnector.db.models.user import User, UserSession


async def get_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, name: str, email: str, password_hash: str, avatar: Optional[str]) -> User:
    db_user = User(name=name, email=email, password_hash=password_hash, avatar=avatar)
    db.add(db_user)
    await db.flush()
    await db.refresh(db_user)
    return db_user


async def delete_user(db: AsyncSession, user_id: UUID) -> int:
    """
    Delete a user and the session tokens issued to it.

    Returns:
        int: Number of users deleted (0 or 1)
    """
    await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    result = await db.execute(delete(User).where(User.id == user_id))
    return result.rowcount


async def create_session(db: AsyncSession, user_id: UUID, token: str, expires_at: datetime) -> UserSession:
    """
    Store a new session token, dropping this user's expired ones.
    """
    await db.execute(
        delete(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.expires_at < utcnow(),
        )
    )
    session = UserSession(user_id=user_id, session_token=token, expires_at=expires_at, last_activity=utcnow())
    db.add(session)
    await db.flush()
    return session


async def get_active_session(db: AsyncSession, token: str) -> Optional[UserSession]:
    """
    Find an unexpired session by its token.
    """
    result = await db.execute(
        select(UserSession).where(
            UserSession.session_token == token,
            UserSession.expires_at > utcnow(),
        )
    )
    return result.scalar_one_or_none()
