"""
Local authentication routes for email/password registration and login.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from devconnector.core.security import get_password_hash, gravatar_url, new_session_token, verify_password
from devconnector.crud import user as user_crud
from devconnector.db.models.user import User
from devconnector.db.session import get_db
from devconnector.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead

from .dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def _issue_session(db: AsyncSession, user: User) -> AuthResponse:
    token, expires_at = new_session_token()
    await user_crud.create_session(db, user_id=user.id, token=token, expires_at=expires_at)
    return AuthResponse(token=token, token_expires_at=expires_at)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    registration: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and return a session token.
    """
    email = registration.email.lower().strip()

    if await user_crud.get_by_email(db, email):
        logger.info(f"[AUTH] Registration refused, email already in use: {email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )

    user = await user_crud.create_user(
        db,
        name=registration.name.strip(),
        email=email,
        password_hash=get_password_hash(registration.password),
        avatar=gravatar_url(email),
    )
    logger.info(f"[AUTH] New user registered: {user.id}")
    return await _issue_session(db, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate with email and password and return a new session token.
    """
    email = credentials.email.lower().strip()
    user = await user_crud.get_by_email(db, email)

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"[AUTH] Invalid credentials for: {email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    logger.info(f"[AUTH] User logged in: {user.id}")
    return await _issue_session(db, user)


@router.get("", response_model=UserRead)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Retrieve the details of the currently authenticated user."""
    return current_user
