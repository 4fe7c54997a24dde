"""
Import all models to ensure they are registered with SQLAlchemy.
"""
from ..base import Base
from .user import User, UserSession
from .profile import Profile
from .post import Post, PostLike

__all__ = ["Base", "User", "UserSession", "Profile", "Post", "PostLike"]
