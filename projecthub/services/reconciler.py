"""Merge auto-discovered Pages repositories with hand-authored project entries.

Both entry points are pure: the same repositories, configuration and account
always produce the same list in the same order.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable, Sequence

from projecthub.models.project import Configuration, ManualEntry, Project, RepositoryRecord

UNTITLED_NAME = "Untitled"
PLACEHOLDER_URL = "#"


def pages_url(account: str, repo_name: str) -> str:
    return f"https://{account}.github.io/{repo_name}/"


def source_url(account: str, repo_name: str) -> str:
    return f"https://github.com/{account}/{repo_name}"


def reconcile(
    repositories: Iterable[RepositoryRecord],
    config: Configuration,
    account: str,
) -> list[Project]:
    """Merge Pages-enabled repositories with the configured manual entries.

    Repositories that are excluded, or whose manual entry supplies its own
    `url`, are left to the manual branch. Every manual entry is materialized
    on its own as well, so an entry that only overrides fields of a
    discovered repository yields two projects: the overridden tile and the
    standalone one.
    """
    excluded = set(config.excluded)
    redirected = config.repos_with_custom_urls()

    discovered = [
        _apply_override(_transform_repo(repo, account), config.find_entry(repo.name))
        for repo in repositories
        if repo.pages_enabled and repo.name not in excluded and repo.name not in redirected
    ]
    manual = [_materialize_entry(entry, account) for entry in config.manual_entries]

    return sort_projects(discovered + manual, config.order)


def reconcile_manual_only(config: Configuration, account: str) -> list[Project]:
    """Build the directory from manual entries alone (GitHub unreachable)."""
    projects = []
    for entry in config.manual_entries:
        project = _materialize_entry(entry, account)
        if not project.url:
            project.url = pages_url(account, entry.repo_name) if entry.repo_name else PLACEHOLDER_URL
        projects.append(project)
    return sort_projects(projects, config.order)


def sort_projects(projects: Sequence[Project], order: Sequence[str]) -> list[Project]:
    """Ranked names first (by first position in `order`), then the rest by name."""
    ranks: dict[str, int] = {}
    for index, name in enumerate(order):
        ranks.setdefault(name, index)

    def sort_key(project: Project) -> tuple:
        rank = ranks.get(project.name)
        if rank is not None:
            return (0, rank, "", "")
        return (1, 0, _collation_key(project.name), project.name)

    return sorted(projects, key=sort_key)


def _collation_key(name: str) -> str:
    # Accents and case only break ties, as in a locale-aware compare.
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold()


def _transform_repo(repo: RepositoryRecord, account: str) -> Project:
    return Project(
        name=repo.name,
        description=repo.description or "",
        url=pages_url(account, repo.name),
        repo_url=repo.canonical_url,
        thumbnail=None,
        is_auto_discovered=True,
    )


def _apply_override(project: Project, entry: ManualEntry | None) -> Project:
    if entry is None:
        return project
    # repo_url is never overridden from an entry
    project.name = entry.display_name or project.name
    project.description = entry.description or project.description
    project.url = entry.url or project.url
    project.thumbnail = entry.thumbnail or project.thumbnail
    return project


def _materialize_entry(entry: ManualEntry, account: str) -> Project:
    if entry.repo_url_declared:
        repo_url = entry.repo_url
    elif entry.repo_name:
        repo_url = source_url(account, entry.repo_name)
    else:
        repo_url = None

    return Project(
        name=entry.display_name or entry.repo_name or UNTITLED_NAME,
        description=entry.description or "",
        url=entry.url,
        repo_url=repo_url,
        thumbnail=entry.thumbnail,
        is_auto_discovered=False,
    )
