"""
CRUD operations for profiles.
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.db.models.profile import Profile


async def get_by_user_id(db: AsyncSession, user_id: UUID) -> Optional[Profile]:
    """
    Get the profile owned by a user.

    Args:
        db: Database session
        user_id: Owner's user ID

    Returns:
        Optional[Profile]: Profile if found, None otherwise
    """
    result = await db.execute(
        select(Profile).where(Profile.user_id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_profiles(db: AsyncSession) -> List[Profile]:
    """
    Get every profile, oldest first.
    """
    result = await db.execute(select(Profile).order_by(Profile.created_at))
    return list(result.scalars().all())


async def create_profile(db: AsyncSession, user_id: UUID, fields: Dict[str, Any]) -> Profile:
    """
    Insert a new profile for ``user_id``.

    Raises:
        sqlalchemy.exc.IntegrityError: if the user already has a profile
    """
    db_profile = Profile(user_id=user_id, **fields)
    db.add(db_profile)
    await db.flush()
    await db.refresh(db_profile)
    return db_profile


async def update_fields(db: AsyncSession, db_obj: Profile, changes: Dict[str, Any]) -> Profile:
    """
    Replace only the listed fields of an existing profile.

    Args:
        db: Database session.
        db_obj: The profile object to update.
        changes: Mapping of field name to new value.

    Returns:
        The updated profile object.

    Raises:
        sqlalchemy.orm.exc.StaleDataError: if the row changed since it was read
    """
    for field, value in changes.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    # Commit is handled by the get_db context manager
    return db_obj


async def delete_by_user_id(db: AsyncSession, user_id: UUID) -> int:
    """
    Delete the profile owned by a user, if any.

    Returns:
        int: Number of profiles deleted (0 or 1)
    """
    result = await db.execute(delete(Profile).where(Profile.user_id == user_id))
    return result.rowcount
