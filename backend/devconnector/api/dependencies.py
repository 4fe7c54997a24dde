"""
Shared dependencies for API endpoints.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.db.session import get_db
from devconnector.services import AccountService, PostService, ProfileService


async def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


async def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


async def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)
