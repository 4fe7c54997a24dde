"""
Client for the GitHub repository listing shown on developer profiles.

One GET per lookup, no caching. Transport failures are retried with
exponential backoff up to a fixed number of attempts; any non-200 answer
from GitHub is reported as "not found".
"""
import logging
from typing import Any, Optional, Tuple

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from devconnector.core.config import settings
from devconnector.core.errors import NotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Fetches the latest public repositories of a GitHub user.

    Args:
        base_url: GitHub REST API root
        credentials: Optional (client_id, client_secret) pair sent as basic auth
        timeout: Per-request timeout in seconds
        max_attempts: Total attempts for a lookup that fails at transport level
        retry_wait: Base delay in seconds for exponential backoff between attempts
        transport: Optional httpx transport (used by tests)
    """

    USER_AGENT = "devconnector-api"
    PER_PAGE = 5

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        credentials: Optional[Tuple[str, str]] = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        retry_wait: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.retry_wait = retry_wait
        self.transport = transport

    async def get_repositories(self, username: str) -> Any:
        """
        Return the decoded JSON body of GitHub's repository listing for
        ``username``: five repositories, oldest created first.

        Raises:
            NotFoundError: GitHub answered with anything but 200
            UpstreamUnavailableError: GitHub could not be reached or sent an undecodable body
        """
        url = f"{self.base_url}/users/{username}/repos"
        params = {"per_page": self.PER_PAGE, "sort": "created", "direction": "asc"}

        try:
            response = await self._get_with_retry(url, params)
        except RetryError as e:
            last = e.last_attempt.exception()
            logger.exception(f"GitHub lookup for '{username}' failed after {self.max_attempts} attempts: {last}")
            raise UpstreamUnavailableError()

        if response.status_code != 200:
            logger.warning(f"GitHub lookup for '{username}' returned {response.status_code}")
            raise NotFoundError("No Github profile found")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GitHub lookup for '{username}' returned a body that is not JSON: {e}")
            raise UpstreamUnavailableError()

    async def _get_with_retry(self, url: str, params: dict) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"user-agent": self.USER_AGENT, "accept": "application/vnd.github+json"},
            auth=self.credentials,
            transport=self.transport,
        ) as client:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.retry_wait, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
            ):
                with attempt:
                    return await client.get(url, params=params)


def get_github_client() -> GitHubClient:
    """
    FastAPI dependency returning a client built from settings.
    """
    return GitHubClient(
        base_url=settings.GITHUB_API_URL,
        credentials=settings.github_credentials,
        timeout=settings.GITHUB_TIMEOUT,
        max_attempts=settings.GITHUB_MAX_ATTEMPTS,
        retry_wait=settings.GITHUB_RETRY_WAIT,
    )
