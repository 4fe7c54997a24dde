"""
Pydantic schemas for the application.
"""
from devconnector.schemas import auth
from devconnector.schemas import post
from devconnector.schemas import profile

__all__ = ["auth", "post", "profile"]
