"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Project Hub"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # GitHub API
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_BASE_URL: str = "https://api.github.com"

    # GitHub client resilience controls
    GITHUB_TIMEOUT_SECONDS: float = 30.0
    GITHUB_MAX_RETRIES: int = 3
    GITHUB_BACKOFF_BASE_SECONDS: float = 1.0
    GITHUB_BACKOFF_MAX_SECONDS: float = 16.0
    GITHUB_RATE_LIMIT_BUFFER_SECONDS: int = 2

    # Repository listing
    GITHUB_REPOS_PER_PAGE: int = 100
    GITHUB_MAX_REPO_PAGES: int = 1  # One page of 100 covers most personal accounts

    # Project configuration (local path or http(s) URL to projects.yaml)
    PROJECTS_CONFIG_SOURCE: str = "projects.yaml"
    PROJECTS_CONFIG_TIMEOUT_SECONDS: float = 10.0

    # Account used when the configuration names none
    DEFAULT_USERNAME: str = "darrenmcewan"

    USER_AGENT: str = "ProjectHub/1.0"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
