"""
User model for authentication and user management.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String, TEXT, Uuid
from sqlalchemy.orm import relationship

from ..base import Base, UUIDMixin, TimestampMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    A registered account. Profiles and posts refer to it by id only.
    """
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String)

    sessions = relationship("UserSession", back_populates="user", passive_deletes=True)


class UserSession(Base, UUIDMixin, TimestampMixin):
    """
    Session token issued at login, resolved on every authenticated request.
    """
    __tablename__ = "user_sessions"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_token = Column(TEXT, unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    last_activity = Column(DateTime(timezone=True))

    # Relationships
    user = relationship("User", back_populates="sessions")
