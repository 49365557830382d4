"""
Fork model for github-forks.

Represents a repository fork as returned by the GitHub REST API, keeping
only the fields the fork lifecycle reads plus the raw payload.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ForkSort(str, Enum):
    """Sort orders accepted by the fork listing endpoint."""

    NEWEST = "newest"
    OLDEST = "oldest"
    STARGAZERS = "stargazers"
    WATCHERS = "watchers"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp ("2024-01-15T10:30:00Z")."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError) as e:
        logger.debug(f"Failed to parse timestamp '{value}': {e}")
        return None


@dataclass(frozen=True)
class Fork:
    """A repository fork.

    ``full_name`` identifies the fork (``owner/repo``) and ``svn_url`` is the
    URI teardown deletes it by.
    """

    full_name: str
    svn_url: str
    name: str = ""
    owner_login: str = ""
    html_url: str = ""
    clone_url: str = ""
    created_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def namespace(self) -> str:
        """Owner or organization part of ``full_name``."""
        return self.full_name.split("/", 1)[0]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Fork":
        """Build a Fork from a GitHub repository JSON object.

        Raises:
            ValueError: If the payload has no full_name
        """
        full_name = payload.get("full_name") or ""
        if not full_name:
            raise ValueError("Repository payload is missing 'full_name'")

        owner = payload.get("owner") or {}
        html_url = payload.get("html_url") or ""

        return cls(
            full_name=full_name,
            # svn_url mirrors html_url on github.com; fall back for hosts
            # that omit it
            svn_url=payload.get("svn_url") or html_url,
            name=payload.get("name") or full_name.split("/", 1)[-1],
            owner_login=owner.get("login", "") if isinstance(owner, dict) else "",
            html_url=html_url,
            clone_url=payload.get("clone_url") or "",
            created_at=_parse_timestamp(payload.get("created_at")),
            raw=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary used for CLI JSON output."""
        return {
            "full_name": self.full_name,
            "svn_url": self.svn_url,
            "name": self.name,
            "owner": self.owner_login,
            "html_url": self.html_url,
            "clone_url": self.clone_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
