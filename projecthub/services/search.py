"""Live search over reconciled projects."""

from __future__ import annotations

from typing import Iterable, Optional

from projecthub.models.project import Project


def matches_query(project: Project, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in project.name.lower() or needle in (project.description or "").lower()


def filter_projects(projects: Iterable[Project], query: Optional[str]) -> list[Project]:
    """Keep projects whose name or description contains `query`, case-insensitively.

    A blank query keeps everything. Order is preserved.
    """
    if not query:
        return list(projects)
    return [project for project in projects if matches_query(project, query)]
