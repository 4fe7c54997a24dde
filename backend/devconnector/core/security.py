import hashlib
import secrets
from datetime import datetime, timedelta

# Import passlib for hashing
from passlib.context import CryptContext

from devconnector.core.config import settings
from devconnector.db.base import utcnow

# --- Hashing Setup ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
# --- End Hashing Setup ---


def gravatar_url(email: str, size: int = 200) -> str:
    """Avatar URL derived from the normalized email address (mystery-person fallback)."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s={size}&r=pg&d=mm"


def new_session_token() -> tuple[str, datetime]:
    """
    Generate an opaque session token and its expiry.
    """
    expires_at = utcnow() + timedelta(days=settings.SESSION_EXPIRATION_DAYS)
    return secrets.token_urlsafe(32), expires_at
