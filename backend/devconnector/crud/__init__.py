"""
CRUD operations for the application.
"""
from devconnector.crud import post
from devconnector.crud import profile
from devconnector.crud import user

__all__ = ["post", "profile", "user"]
