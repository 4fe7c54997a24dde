import base64

import httpx
import pytest

from devconnector.core.errors import NotFoundError, UpstreamUnavailableError
from devconnector.github import GitHubClient

REPOS = [{"name": "first-repo", "html_url": "https://github.com/octocat/first-repo"}]


def make_client(handler, **kwargs):
    return GitHubClient(
        base_url="https://api.github.test",
        retry_wait=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_returns_body_unmodified():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=REPOS)

    repos = await make_client(handler).get_repositories("octocat")

    assert repos == REPOS
    request = seen[0]
    assert request.url.path == "/users/octocat/repos"
    assert request.url.params["per_page"] == "5"
    assert request.url.params["sort"] == "created"
    assert request.url.params["direction"] == "asc"
    assert request.headers["user-agent"] == GitHubClient.USER_AGENT


async def test_sends_client_credentials_when_configured():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    await make_client(handler, credentials=("client-id", "client-secret")).get_repositories("octocat")

    expected = base64.b64encode(b"client-id:client-secret").decode()
    assert seen[0].headers["authorization"] == f"Basic {expected}"


@pytest.mark.parametrize("status_code", [404, 403, 500])
async def test_non_200_is_not_found(status_code):
    def handler(request):
        return httpx.Response(status_code, json={"message": "Not Found"})

    with pytest.raises(NotFoundError) as exc_info:
        await make_client(handler).get_repositories("ghost")
    assert exc_info.value.message == "No Github profile found"


async def test_transport_errors_are_retried_then_reported():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError):
        await make_client(handler, max_attempts=3).get_repositories("octocat")
    assert len(attempts) == 3


async def test_transient_error_recovers_on_retry():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json=REPOS)

    assert await make_client(handler).get_repositories("octocat") == REPOS
    assert len(attempts) == 2


async def test_undecodable_body_is_reported_unavailable():
    def handler(request):
        return httpx.Response(200, content=b"<html>rate limited</html>", headers={"content-type": "text/html"})

    with pytest.raises(UpstreamUnavailableError):
        await make_client(handler).get_repositories("octocat")
