"""
Fork API Client for github-forks.

Fork creation, fork listing and repository deletion against the GitHub
REST API, plus the lookups the fork lifecycle needs.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ..logging_utils import format_error_log, get_log_extra
from ..models.fork import Fork, ForkSort
from .base_client import GitHubAPIClient
from .repository_uri import resolve_repository_uri

logger = logging.getLogger(__name__)


class ForkAPIClient(GitHubAPIClient):
    """API client for fork and repository operations."""

    def get_authenticated_user(self) -> Dict[str, Any]:
        """Return the user the access token belongs to (GET /user)."""
        response = self._request(
            "GET", "/user", "get authenticated user", requires_auth=True
        )
        return dict(response.json())

    def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        """Return repository details (GET /repos/{owner}/{repo})."""
        response = self._request(
            "GET", f"/repos/{owner}/{repo}", f"get repository '{owner}/{repo}'"
        )
        return dict(response.json())

    def create_fork(
        self, owner: str, repo: str, organization: Optional[str] = None
    ) -> Fork:
        """
        Fork a repository, optionally into an organization.

        GitHub answers 202 Accepted and finishes copying the git data in the
        background; the returned repository object is usable immediately.

        Args:
            owner: Owner of the repository to fork
            repo: Name of the repository to fork
            organization: Organization to fork into (defaults to the
                authenticated user's namespace)

        Returns:
            The created fork

        Raises:
            APIClientError: If the request fails
        """
        body: Dict[str, Any] = {}
        if organization:
            body["organization"] = organization

        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/forks",
            f"fork '{owner}/{repo}'",
            json=body,
            requires_auth=True,
        )
        fork = Fork.from_api(response.json())
        logger.info(f"Forked {owner}/{repo} to {fork.full_name}")
        return fork

    def iter_forks(
        self, owner: str, repo: str, sort: ForkSort = ForkSort.NEWEST
    ) -> Iterator[Fork]:
        """Lazily yield the forks of a repository, page by page."""
        sort = ForkSort(sort)
        for item in self._paginate(
            f"/repos/{owner}/{repo}/forks",
            f"list forks of '{owner}/{repo}'",
            params={"sort": sort.value},
        ):
            yield Fork.from_api(item)

    def list_forks(
        self, owner: str, repo: str, sort: ForkSort = ForkSort.NEWEST
    ) -> List[Fork]:
        """Return all forks of a repository in the requested order."""
        forks = list(self.iter_forks(owner, repo, sort))
        logger.debug(f"Listed {len(forks)} forks of {owner}/{repo}")
        return forks

    def delete_repository(self, uri: str) -> None:
        """
        Delete a repository identified by URI.

        Args:
            uri: svn/html URL, clone URL, API URL or owner/repo

        Raises:
            RepositoryURIError: If the URI cannot be resolved
            APIClientError: If the request fails
        """
        owner, repo = resolve_repository_uri(uri)
        self._request(
            "DELETE",
            f"/repos/{owner}/{repo}",
            f"delete repository '{owner}/{repo}'",
            requires_auth=True,
        )
        logger.info(
            format_error_log("FORK-API-002", "Deleted repository", repo=f"{owner}/{repo}"),
            extra=get_log_extra("FORK-API-002"),
        )
