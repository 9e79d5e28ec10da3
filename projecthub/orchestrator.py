"""Directory orchestrator: configuration, GitHub discovery, reconciliation and fallback."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from projecthub.config.loader import ConfigurationLoader, config_loader
from projecthub.errors import DirectoryLoadError, GitHubSourceError
from projecthub.models.project import Directory
from projecthub.services.profile import fallback_profile, map_profile
from projecthub.services.reconciler import reconcile, reconcile_manual_only
from projecthub.sources.github import GitHubPagesClient, sanitize_log_extra

logger = logging.getLogger(__name__)

SOURCE_GITHUB = "github"
SOURCE_MANUAL = "manual"


class ProjectHubOrchestrator:
    """Builds the project directory for the configured account."""

    def __init__(
        self,
        *,
        loader: ConfigurationLoader | None = None,
        github_client_factory: Callable[[], Any] = GitHubPagesClient,
    ) -> None:
        self._loader = loader or config_loader
        self._github_client_factory = github_client_factory

    async def get_projects(self) -> Directory:
        """Reconcile GitHub Pages repositories with the configuration.

        Raises GitHubSourceError when either GitHub request fails.
        """
        config = await self._loader.load()
        account = config.account

        async with self._github_client_factory() as client:
            repos, profile_payload = await asyncio.gather(
                client.list_user_repos(account),
                client.get_user_profile(account),
            )

        projects = reconcile(repos, config, account)
        logger.info(
            "Directory reconciled from GitHub",
            extra=sanitize_log_extra(account=account, repositories=len(repos), projects=len(projects)),
        )
        return Directory(projects=projects, profile=map_profile(profile_payload), source=SOURCE_GITHUB)

    async def get_manual_projects_only(self) -> Directory:
        """Directory built from configuration alone."""
        config = await self._loader.load()
        account = config.account
        projects = reconcile_manual_only(config, account)
        return Directory(projects=projects, profile=fallback_profile(account), source=SOURCE_MANUAL)

    async def load_directory(self) -> Directory:
        """Load the directory, falling back to manual entries if GitHub fails.

        Raises DirectoryLoadError when the fallback fails as well.
        """
        try:
            return await self.get_projects()
        except GitHubSourceError as e:
            logger.warning(f"Failed to fetch from GitHub API, falling back to manual projects: {e}")

        try:
            return await self.get_manual_projects_only()
        except Exception as e:
            logger.error(f"Failed to load any projects: {e}", exc_info=True)
            raise DirectoryLoadError() from e
