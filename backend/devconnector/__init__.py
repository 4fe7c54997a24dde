"""
DevConnector API: developer profiles, posts and likes.
"""
from devconnector.__version__ import __version__

__all__ = ["__version__"]
