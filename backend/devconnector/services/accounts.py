"""
Account lifecycle: removing a user together with their profile.
"""
import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.core.errors import StoreUnavailableError
from devconnector.crud import profile as profile_crud
from devconnector.crud import user as user_crud

logger = logging.getLogger(__name__)


class AccountService:
    """
    Deletes an account in two ordered steps: the profile, then the user.

    The steps are not a transaction. If the second one fails after the first
    succeeded, the user survives without a profile. Posts and likes written by
    the user are left in place and keep pointing at the deleted user id.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def delete_account(self, user_id: UUID) -> None:
        removed = await profile_crud.delete_by_user_id(self.db, user_id)
        # Make the profile removal durable before touching the user record
        await self.db.commit()
        logger.info(f"Deleted {removed} profile(s) for user {user_id}")

        try:
            await user_crud.delete_user(self.db, user_id)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Profile of user {user_id} removed but deleting the user failed")
            raise StoreUnavailableError()

        logger.info(f"Deleted account {user_id}")
