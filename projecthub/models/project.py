"""Value records exchanged between the sources, the reconciler and presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class RepositoryRecord:
    """Repository as reported by the GitHub repository listing."""

    name: str
    description: Optional[str] = None
    canonical_url: str = ""
    pages_enabled: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RepositoryRecord":
        return cls(
            name=payload.get("name"),
            description=payload.get("description"),
            canonical_url=payload.get("html_url") or "",
            pages_enabled=bool(payload.get("has_pages")),
        )


@dataclass(frozen=True, slots=True)
class ManualEntry:
    """Hand-authored project entry from the `projects` list of projects.yaml.

    `repo_url_declared` is True when the `repoUrl` key was present, so an
    explicit `repoUrl: null` (no source link) can be told apart from an
    absent key (derive the link from `repo_name`).
    """

    repo_name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    repo_url: Optional[str] = None
    repo_url_declared: bool = False
    thumbnail: Optional[str] = None
    order: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Configuration:
    """Normalized projects.yaml contents."""

    account: str
    excluded: tuple[str, ...] = ()
    order: tuple[str, ...] = ()
    manual_entries: tuple[ManualEntry, ...] = ()

    def find_entry(self, repo_name: str) -> Optional[ManualEntry]:
        """First manual entry that references `repo_name`, if any."""
        for entry in self.manual_entries:
            if entry.repo_name == repo_name:
                return entry
        return None

    def repos_with_custom_urls(self) -> set[str]:
        """Repo names whose entries supply their own destination URL."""
        return {entry.repo_name for entry in self.manual_entries if entry.url and entry.repo_name}


@dataclass(slots=True)
class Project:
    """Directory tile handed to the presentation layer."""

    name: str
    description: str = ""
    url: Optional[str] = None
    repo_url: Optional[str] = None
    thumbnail: Optional[str] = None
    is_auto_discovered: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "repoUrl": self.repo_url,
            "thumbnail": self.thumbnail,
            "isAutoDiscovered": self.is_auto_discovered,
        }


@dataclass(frozen=True, slots=True)
class Profile:
    """Account header shown above the directory."""

    username: str
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "avatarUrl": self.avatar_url,
            "profileUrl": self.profile_url,
        }


@dataclass(slots=True)
class Directory:
    """Reconciled projects plus the profile they belong to."""

    projects: list[Project]
    profile: Profile
    source: str = "github"

    def to_dict(self) -> dict[str, Any]:
        return {
            "projects": [project.to_dict() for project in self.projects],
            "profile": self.profile.to_dict(),
            "source": self.source,
        }
