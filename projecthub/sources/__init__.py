"""Upstream data sources."""

from projecthub.sources.github import GitHubPagesClient

__all__ = ["GitHubPagesClient"]
