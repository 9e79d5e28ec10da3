"""Profile mapping for the directory header."""

from __future__ import annotations

from typing import Any

from projecthub.models.project import Profile


def map_profile(payload: dict[str, Any]) -> Profile:
    """Map a GitHub `/users/{account}` payload."""
    return Profile(
        username=payload.get("login"),
        avatar_url=payload.get("avatar_url"),
        profile_url=payload.get("html_url"),
    )


def fallback_profile(account: str) -> Profile:
    """Profile derived from the account name when GitHub is unreachable."""
    return Profile(
        username=account,
        avatar_url=f"https://github.com/{account}.png",
        profile_url=f"https://github.com/{account}",
    )
