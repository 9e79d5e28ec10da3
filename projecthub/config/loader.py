"""Loader for the hand-authored projects.yaml configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from projecthub.config.settings import settings
from projecthub.models.project import Configuration, ManualEntry

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    """Reads projects.yaml once per process and serves the cached result.

    The source is a local path or an http(s) URL. Any failure to read,
    parse or interpret it yields the default configuration instead of an
    error.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        *,
        default_account: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._source = source or settings.PROJECTS_CONFIG_SOURCE
        self._default_account = default_account or settings.DEFAULT_USERNAME
        self._timeout_seconds = timeout_seconds or settings.PROJECTS_CONFIG_TIMEOUT_SECONDS
        self._transport = transport
        self._config: Optional[Configuration] = None

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    async def load(self) -> Configuration:
        if self._config is not None:
            return self._config

        try:
            raw_text = await self._read_source()
            self._config = self.parse(raw_text)
            logger.info(
                f"Loaded project configuration from {self._source}: "
                f"{len(self._config.manual_entries)} entries, {len(self._config.excluded)} excluded"
            )
        except (OSError, httpx.HTTPError, yaml.YAMLError, ValueError, TypeError) as e:
            logger.warning(f"Could not load {self._source}, using defaults: {e}")
            self._config = self.default_configuration()

        return self._config

    def default_configuration(self) -> Configuration:
        return Configuration(account=self._default_account)

    def parse(self, raw_text: str) -> Configuration:
        """Parse YAML text into a normalized Configuration.

        Raises ValueError when the document has the wrong shape.
        """
        document = yaml.safe_load(raw_text) or {}
        if not isinstance(document, dict):
            raise ValueError(f"expected a mapping at the top level, got {type(document).__name__}")

        return Configuration(
            account=_text(document.get("username")) or self._default_account,
            excluded=tuple(_string_list(document.get("exclude"), "exclude")),
            order=tuple(_string_list(document.get("order"), "order")),
            manual_entries=tuple(_manual_entry(item) for item in _list(document.get("projects"), "projects")),
        )

    async def _read_source(self) -> str:
        if self._source.startswith(("http://", "https://")):
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self._source, headers={"User-Agent": settings.USER_AGENT})
                response.raise_for_status()
                return response.text

        return Path(self._source).read_text(encoding="utf-8")


def _manual_entry(item: Any) -> ManualEntry:
    if not isinstance(item, dict):
        raise ValueError(f"project entries must be mappings, got {type(item).__name__}")

    return ManualEntry(
        repo_name=_text(item.get("repo")),
        display_name=_text(item.get("name")),
        description=_text(item.get("description")),
        url=_text(item.get("url")),
        repo_url=_text(item.get("repoUrl")),
        repo_url_declared="repoUrl" in item,
        thumbnail=_text(item.get("thumbnail")),
        order=_optional_int(item.get("order")),
    )


def _list(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    return [str(item) for item in _list(value, key) if item is not None]


def _optional_int(value: Any) -> Optional[int]:
    # unreadable values become None
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


config_loader = ConfigurationLoader()
