"""
Fork Lifecycle Test Harness.

Creates forks, lists them, checks the expected fork is listed, and deletes
it again. Deletion is best-effort by default: a failed delete is logged and
recorded, and only raises when strict teardown is requested.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from ..api_clients.base_client import APIClientError
from ..api_clients.fork_client import ForkAPIClient
from ..api_clients.repository_uri import RepositoryURIError
from ..config.snapshot import load_snapshot, restore_snapshot
from ..logging_utils import format_error_log, get_log_extra
from ..models.fork import Fork, ForkSort

logger = logging.getLogger(__name__)


class ForkAssertionError(AssertionError):
    """The fork listing does not contain the expected fork."""

    def __init__(self, expected_full_name: str, listed_full_names: Sequence[str]):
        self.expected_full_name = expected_full_name
        self.listed_full_names = list(listed_full_names)
        super().__init__(
            f"Expected fork '{expected_full_name}' not found among "
            f"{len(self.listed_full_names)} listed forks"
        )


class TeardownError(Exception):
    """A fork could not be deleted during strict teardown."""

    def __init__(self, uri: str, cause: Exception):
        self.uri = uri
        self.cause = cause
        super().__init__(f"Failed to delete fork '{uri}': {cause}")


class ForkLifecycleHarness:
    """Setup, act, assert and teardown steps for fork scenarios."""

    def __init__(self, client: ForkAPIClient, strict_teardown: bool = False):
        """
        Args:
            client: Fork API client used for every remote call
            strict_teardown: Raise TeardownError when deletion fails instead
                of only logging it
        """
        self.client = client
        self.strict_teardown = strict_teardown
        self.teardown_failures: List[str] = []

    def acting_user(self) -> str:
        """Login of the user the configured token belongs to."""
        return str(self.client.get_authenticated_user()["login"])

    def create_fork(
        self, owner: str, repo: str, organization: Optional[str] = None
    ) -> Fork:
        return self.client.create_fork(owner, repo, organization=organization)

    def list_forks(
        self, owner: str, repo: str, sort: ForkSort = ForkSort.NEWEST
    ) -> List[Fork]:
        return self.client.list_forks(owner, repo, sort=sort)

    @staticmethod
    def assert_contains(forks: Sequence[Fork], expected_full_name: str) -> None:
        """
        Check that ``expected_full_name`` is among the listed forks.

        GitHub logins are case-insensitive, so the comparison is too.

        Raises:
            ForkAssertionError: If the fork is not listed
        """
        listed = [fork.full_name for fork in forks]
        wanted = expected_full_name.lower()
        if not any(name.lower() == wanted for name in listed):
            raise ForkAssertionError(expected_full_name, listed)

    def delete_fork(self, svn_url: str) -> bool:
        """
        Delete a fork by URI, best-effort.

        Returns:
            True if the fork was deleted, False if deletion failed

        Raises:
            TeardownError: If deletion failed and strict teardown is on
        """
        try:
            self.client.delete_repository(svn_url)
            return True
        except (APIClientError, RepositoryURIError) as e:
            self.teardown_failures.append(svn_url)
            logger.warning(
                format_error_log(
                    "FORK-TEARDOWN-001", "Failed to delete fork", uri=svn_url, error=e
                ),
                extra=get_log_extra("FORK-TEARDOWN-001"),
            )
            if self.strict_teardown:
                raise TeardownError(svn_url, e) from e
            return False

    def restore_configuration(self, path: Union[str, Path]) -> None:
        """Reapply the configuration snapshot saved at ``path``."""
        snapshot = load_snapshot(path)
        restore_snapshot(snapshot)
        logger.info(
            format_error_log(
                "FORK-CONFIG-002",
                "Configuration restored",
                path=snapshot.config_path,
                existed=snapshot.existed,
            ),
            extra=get_log_extra("FORK-CONFIG-002"),
        )

    @contextmanager
    def fork_fixture(
        self, owner: str, repo: str, organization: Optional[str] = None
    ) -> Iterator[Fork]:
        """Create a fork for the duration of the block, then delete it."""
        fork = self.create_fork(owner, repo, organization=organization)
        try:
            yield fork
        finally:
            self.delete_fork(fork.svn_url)
