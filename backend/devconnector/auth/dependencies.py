"""
Authentication dependencies for FastAPI.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader, OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.core.errors import UnauthenticatedError
from devconnector.crud import user as user_crud
from devconnector.db.base import utcnow
from devconnector.db.models.user import User
from devconnector.db.session import get_db

# Configure logging
logger = logging.getLogger(__name__)

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="api/auth/login",
    auto_error=False
)

# Legacy header still sent by older frontends
auth_token_header = APIKeyHeader(name="x-auth-token", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    legacy_token: Optional[str] = Depends(auth_token_header),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Validate the session token and return the current user.

    Args:
        token: Bearer token from the Authorization header
        legacy_token: Token from the x-auth-token header
        db: Database session

    Returns:
        User: The current authenticated user

    Raises:
        UnauthenticatedError: If no valid, unexpired session matches the token
    """
    token = token or legacy_token
    if not token:
        raise UnauthenticatedError("No token, authorization denied")

    session = await user_crud.get_active_session(db, token)
    if not session:
        logger.warning("Rejected request with unknown or expired session token")
        raise UnauthenticatedError("Token is not valid")

    user = await user_crud.get_user(db, session.user_id)
    if not user:
        raise UnauthenticatedError("Token is not valid")

    # Committed here so a rollback inside the route cannot discard it
    session.last_activity = utcnow()
    await db.commit()
    return user
