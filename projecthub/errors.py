"""Exceptions raised across the project hub."""

from __future__ import annotations

from typing import Optional


class ProjectHubError(Exception):
    """Base error for project hub failures."""


class GitHubSourceError(ProjectHubError):
    """GitHub API call failed (non-success status or transport error)."""

    def __init__(self, message: str, *, path: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class DirectoryLoadError(ProjectHubError):
    """Neither the GitHub path nor the manual fallback produced a directory."""

    USER_MESSAGE = "Unable to load projects"

    def __init__(self, message: str = USER_MESSAGE) -> None:
        super().__init__(message)
