from __future__ import annotations

import time
from typing import Any, Callable

import httpx
import pytest

from projecthub.errors import GitHubSourceError
from projecthub.sources import github
from projecthub.sources.github import GitHubPagesClient, rate_limit_wait, sanitize_for_log


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> GitHubPagesClient:
    return GitHubPagesClient(
        token=kwargs.pop("token", None),
        base_url="https://api.github.test",
        backoff_base_seconds=0.001,
        backoff_max_seconds=kwargs.pop("backoff_max_seconds", 0.001),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _repo_payload(name: str, *, has_pages: bool) -> dict[str, Any]:
    return {
        "name": name,
        "description": f"{name} description",
        "html_url": f"https://github.com/alice/{name}",
        "has_pages": has_pages,
        "stargazers_count": 3,
    }


@pytest.mark.asyncio
async def test_list_user_repos_maps_payload_and_sends_listing_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[_repo_payload("site", has_pages=True), _repo_payload("lib", has_pages=False)])

    async with _client(handler, token="secret-token") as client:
        repos = await client.list_user_repos("alice")

    assert [(repo.name, repo.pages_enabled) for repo in repos] == [("site", True), ("lib", False)]
    assert repos[0].canonical_url == "https://github.com/alice/site"
    assert repos[0].description == "site description"

    request = seen[0]
    assert request.url.path == "/users/alice/repos"
    assert request.url.params["per_page"] == "100"
    assert request.url.params["sort"] == "updated"
    assert request.headers["Authorization"] == "Bearer secret-token"


@pytest.mark.asyncio
async def test_list_user_repos_follows_full_pages_up_to_cap() -> None:
    pages: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = request.url.params["page"]
        pages.append(page)
        if page == "1":
            return httpx.Response(200, json=[_repo_payload("a", has_pages=True), _repo_payload("b", has_pages=True)])
        return httpx.Response(200, json=[_repo_payload("c", has_pages=True)])

    async with _client(handler, per_page=2, max_pages=5) as client:
        repos = await client.list_user_repos("alice")

    assert pages == ["1", "2"]
    assert [repo.name for repo in repos] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_get_user_profile_returns_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/alice"
        return httpx.Response(200, json={"login": "alice", "avatar_url": "a.png", "html_url": "https://github.com/alice"})

    async with _client(handler) as client:
        profile = await client.get_user_profile("alice")

    assert profile["login"] == "alice"


@pytest.mark.asyncio
async def test_http_error_raises_source_error_with_status() -> None:
    async with _client(lambda request: httpx.Response(404, json={"message": "Not Found"})) as client:
        with pytest.raises(GitHubSourceError) as excinfo:
            await client.list_user_repos("ghost")

    assert excinfo.value.status_code == 404
    assert excinfo.value.path == "/users/ghost/repos"


@pytest.mark.asyncio
async def test_network_error_raises_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(GitHubSourceError):
            await client.get_user_profile("alice")


@pytest.mark.asyncio
async def test_rate_limit_is_retried_then_succeeds() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(429, headers={"retry-after": "0"})
        return httpx.Response(200, json=[])

    async with _client(handler, max_retries=3) as client:
        repos = await client.list_user_repos("alice")

    assert repos == []
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_rate_limit_exhaustion_raises_source_error() -> None:
    handler = lambda request: httpx.Response(403, headers={"x-ratelimit-remaining": "0", "retry-after": "0"})

    async with _client(handler, max_retries=2) as client:
        with pytest.raises(GitHubSourceError) as excinfo:
            await client.list_user_repos("alice")

    assert excinfo.value.status_code == 429


@pytest.mark.asyncio
async def test_distant_rate_limit_reset_fails_fast(monkeypatch) -> None:
    sleeps: list[float] = []
    calls = {"count": 0}

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr(github.asyncio, "sleep", fake_sleep)

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        reset = str(int(time.time()) + 3600)
        return httpx.Response(403, headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": reset})

    async with _client(handler, max_retries=3, backoff_max_seconds=16.0) as client:
        with pytest.raises(GitHubSourceError) as excinfo:
            await client.list_user_repos("alice")

    assert excinfo.value.status_code == 429
    assert calls["count"] == 1
    assert all(seconds <= 16.0 for seconds in sleeps)


@pytest.mark.asyncio
async def test_short_retry_after_is_honored_but_not_on_final_attempt(monkeypatch) -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr(github.asyncio, "sleep", fake_sleep)
    handler = lambda request: httpx.Response(429, headers={"retry-after": "2"})

    async with _client(handler, max_retries=2, backoff_max_seconds=16.0) as client:
        with pytest.raises(GitHubSourceError):
            await client.get_user_profile("alice")

    assert sleeps.count(2.0) == 1


@pytest.mark.asyncio
async def test_unexpected_listing_shape_raises_source_error() -> None:
    async with _client(lambda request: httpx.Response(200, json={"message": "oops"})) as client:
        with pytest.raises(GitHubSourceError):
            await client.list_user_repos("alice")


def test_sanitize_for_log_redacts_tokens() -> None:
    sanitized = sanitize_for_log({"authorization": "Bearer abc", "error": "bad token=abc123", "path": "/users/alice"})

    assert sanitized["authorization"] == "***REDACTED***"
    assert "abc123" not in sanitized["error"]
    assert sanitized["path"] == "/users/alice"


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({"retry-after": "7", "x-ratelimit-reset": "2000"}, 7.0),
        ({"retry-after": "-3"}, 0.0),
        ({"retry-after": "soon", "x-ratelimit-reset": "1030"}, 35.0),
        ({"x-ratelimit-reset": "900"}, 0.0),
        ({"x-ratelimit-reset": "nan"}, 1.5),
        ({}, 1.5),
    ],
)
def test_rate_limit_wait_prefers_retry_after_then_reset(headers: dict[str, str], expected: float) -> None:
    wait = rate_limit_wait(httpx.Headers(headers), buffer_seconds=5, fallback_seconds=1.5, now=1000.0)

    assert wait == expected
