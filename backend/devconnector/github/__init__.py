"""GitHub repository lookup for profile pages."""

from .client import GitHubClient, get_github_client

__all__ = ['GitHubClient', 'get_github_client']
