"""Async GitHub client for repository and profile discovery."""

from __future__ import annotations

import asyncio
import logging
import math
import re
import time
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from projecthub.config.settings import settings
from projecthub.errors import GitHubSourceError
from projecthub.models.project import RepositoryRecord

logger = logging.getLogger(__name__)

_REDACTED_VALUE = "***REDACTED***"
_SENSITIVE_KEYS = ("authorization", "token")
_TOKEN_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[^\s,;]+"),
    re.compile(r"(?i)(token\s*[=:]\s*)[^\s,;&]+"),
)


def sanitize_for_log(value: Any) -> Any:
    """Return a recursively sanitized copy of log payloads."""

    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            field = str(raw_key)
            if any(keyword in field.lower() for keyword in _SENSITIVE_KEYS):
                sanitized[field] = _REDACTED_VALUE
                continue
            sanitized[field] = sanitize_for_log(raw_value)
        return sanitized

    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_log(item) for item in value]

    if isinstance(value, str):
        redacted = value
        for pattern in _TOKEN_PATTERNS:
            redacted = pattern.sub(rf"\1{_REDACTED_VALUE}", redacted)
        return redacted

    return value


def sanitize_log_extra(**kwargs: Any) -> dict[str, Any]:
    """Helper for `extra=` payloads in structured logging."""

    return {key: sanitize_for_log(value) for key, value in kwargs.items()}


class _RateLimitRetryableError(Exception):
    """Retryable rate-limit signal for tenacity."""


class GitHubPagesClient:
    """GitHub REST client listing an account's repositories and profile.

    Failures are raised as GitHubSourceError so callers can switch to the
    manual-only directory.
    """

    ACCEPT_JSON = "application/vnd.github+json"
    API_VERSION = "2022-11-28"

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        backoff_max_seconds: Optional[float] = None,
        rate_limit_buffer_seconds: Optional[int] = None,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None,
        base_url: Optional[str] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._token = token or settings.GITHUB_TOKEN
        self._timeout_seconds = timeout_seconds or settings.GITHUB_TIMEOUT_SECONDS
        self._max_retries = max_retries or settings.GITHUB_MAX_RETRIES
        self._backoff_base_seconds = backoff_base_seconds or settings.GITHUB_BACKOFF_BASE_SECONDS
        self._backoff_max_seconds = backoff_max_seconds or settings.GITHUB_BACKOFF_MAX_SECONDS
        self._rate_limit_buffer_seconds = rate_limit_buffer_seconds or settings.GITHUB_RATE_LIMIT_BUFFER_SECONDS
        self._per_page = per_page or settings.GITHUB_REPOS_PER_PAGE
        self._max_pages = max_pages or settings.GITHUB_MAX_REPO_PAGES
        self._base_url = base_url or settings.GITHUB_API_BASE_URL
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubPagesClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def list_user_repos(self, account: str) -> list[RepositoryRecord]:
        """List public repositories for `account`, most recently updated first."""
        repos: list[RepositoryRecord] = []
        for page in range(1, self._max_pages + 1):
            payload = await self._get_json(
                f"/users/{account}/repos",
                params={"per_page": self._per_page, "sort": "updated", "page": page},
            )
            if not isinstance(payload, list):
                raise GitHubSourceError(
                    f"Unexpected repository payload for {account}",
                    path=f"/users/{account}/repos",
                )
            repos.extend(RepositoryRecord.from_payload(item) for item in payload if isinstance(item, dict))
            if len(payload) < self._per_page:
                break

        logger.info(f"Fetched {len(repos)} repositories for {account}")
        return repos

    async def get_user_profile(self, account: str) -> dict[str, Any]:
        payload = await self._get_json(f"/users/{account}")
        if not isinstance(payload, dict):
            raise GitHubSourceError(f"Unexpected profile payload for {account}", path=f"/users/{account}")
        return payload

    async def _get_json(self, path: str, *, params: Optional[dict[str, Any]] = None) -> Any:
        client = await self._ensure_client()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=self._backoff_base_seconds, max=self._backoff_max_seconds),
                retry=retry_if_exception_type(_RateLimitRetryableError),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(path, params=params)

                    if response.status_code == 429 or (
                        response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"
                    ):
                        wait_seconds = self._compute_rate_limit_wait(response.headers)
                        logger.warning(
                            "GitHub API rate limit encountered",
                            extra=sanitize_log_extra(
                                path=path,
                                params=params,
                                status_code=response.status_code,
                                retry_after_seconds=wait_seconds,
                            ),
                        )
                        final_attempt = attempt.retry_state.attempt_number >= self._max_retries
                        if final_attempt or wait_seconds > self._backoff_max_seconds:
                            logger.warning(
                                "GitHub request gave up on rate limit",
                                extra=sanitize_log_extra(path=path, params=params, retry_after_seconds=wait_seconds),
                            )
                            raise GitHubSourceError(
                                f"GitHub rate limit encountered ({response.status_code}), resets in {wait_seconds:.0f}s",
                                path=path,
                                status_code=429,
                            )
                        if wait_seconds > 0:
                            await asyncio.sleep(wait_seconds)
                        raise _RateLimitRetryableError(
                            f"GitHub rate limit encountered ({response.status_code})"
                        )

                    response.raise_for_status()
                    return response.json()
        except httpx.HTTPError as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            logger.warning(
                "GitHub request failed",
                extra=sanitize_log_extra(path=path, params=params, error=str(exc), status_code=status_code),
            )
            raise GitHubSourceError(f"GitHub API error: {exc}", path=path, status_code=status_code) from exc
        except ValueError as exc:
            raise GitHubSourceError(f"GitHub returned invalid JSON: {exc}", path=path) from exc

        raise GitHubSourceError("Unknown GitHub request failure", path=path)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": self.ACCEPT_JSON,
            "User-Agent": settings.USER_AGENT,
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def _compute_rate_limit_wait(self, headers: httpx.Headers) -> float:
        return rate_limit_wait(
            headers,
            buffer_seconds=self._rate_limit_buffer_seconds,
            fallback_seconds=self._backoff_base_seconds,
        )


def rate_limit_wait(
    headers: httpx.Headers,
    *,
    buffer_seconds: float = 0,
    fallback_seconds: float = 1.0,
    now: Optional[float] = None,
) -> float:
    """Seconds until GitHub accepts requests again.

    `Retry-After` wins over `X-RateLimit-Reset`; the reset epoch gets
    `buffer_seconds` added. Unreadable or missing headers give
    `fallback_seconds`.
    """
    try:
        retry_after = float(headers["retry-after"])
    except (KeyError, ValueError):
        pass
    else:
        if not math.isnan(retry_after):
            return max(retry_after, 0.0)

    try:
        reset_at = float(headers["x-ratelimit-reset"])
    except (KeyError, ValueError):
        return fallback_seconds
    if math.isnan(reset_at):
        return fallback_seconds

    current = time.time() if now is None else now
    return max(reset_at - current + buffer_seconds, 0.0)
