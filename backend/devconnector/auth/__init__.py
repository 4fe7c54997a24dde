"""
Authentication package: session-token identity for the API.
"""
from .dependencies import get_current_user
from .routes import router

__all__ = ["get_current_user", "router"]
