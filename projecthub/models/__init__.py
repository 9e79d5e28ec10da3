"""Project hub value models"""

from projecthub.models.project import (
    Configuration,
    Directory,
    ManualEntry,
    Profile,
    Project,
    RepositoryRecord,
)

__all__ = [
    "Configuration",
    "Directory",
    "ManualEntry",
    "Profile",
    "Project",
    "RepositoryRecord",
]
