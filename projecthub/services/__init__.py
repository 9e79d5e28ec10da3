"""Stateless project hub services."""

from projecthub.services.profile import fallback_profile, map_profile
from projecthub.services.reconciler import reconcile, reconcile_manual_only, sort_projects
from projecthub.services.search import filter_projects

__all__ = [
    "reconcile",
    "reconcile_manual_only",
    "sort_projects",
    "map_profile",
    "fallback_profile",
    "filter_projects",
]
