"""
Aggregate services: the profile, post and account operations behind the API.
"""
from .accounts import AccountService
from .posts import PostService
from .profiles import ProfileService

__all__ = ["AccountService", "PostService", "ProfileService"]
