"""
Repository URI resolution.

Accepts the different ways a repository is referred to (web/svn URL, clone
URL, API URL, SSH URL or bare owner/repo) and returns its owner and name.
"""

import re
from typing import Tuple
from urllib.parse import urlparse


class RepositoryURIError(ValueError):
    """Raised when a repository URI cannot be resolved to owner/repo."""

    pass


_SSH_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+:(?P<path>.+)$")
_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _split_path(path: str, uri: str, api_url: bool = False) -> Tuple[str, str]:
    segments = [s for s in path.strip("/").split("/") if s]

    # API URLs: /repos/{owner}/{repo} or /api/v3/repos/{owner}/{repo}
    if api_url:
        if segments[:1] == ["repos"]:
            segments = segments[1:]
        elif segments[:3] == ["api", "v3", "repos"]:
            segments = segments[3:]

    if len(segments) < 2:
        raise RepositoryURIError(f"Cannot determine owner/repo from '{uri}'")

    owner, repo = segments[0], segments[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]

    if not _SEGMENT_PATTERN.match(owner) or not _SEGMENT_PATTERN.match(repo):
        raise RepositoryURIError(f"Invalid owner/repo in '{uri}'")

    return owner, repo


def resolve_repository_uri(uri: str) -> Tuple[str, str]:
    """
    Resolve a repository reference to (owner, repo).

    Examples:
        >>> resolve_repository_uri("https://github.com/octocat/Hello-World")
        ('octocat', 'Hello-World')
        >>> resolve_repository_uri("git@github.com:octocat/Hello-World.git")
        ('octocat', 'Hello-World')
        >>> resolve_repository_uri("octocat/Hello-World")
        ('octocat', 'Hello-World')

    Raises:
        RepositoryURIError: If the reference cannot be resolved
    """
    if not uri or not uri.strip():
        raise RepositoryURIError("Repository URI must not be empty")

    value = uri.strip()

    ssh_match = _SSH_PATTERN.match(value)
    if ssh_match:
        return _split_path(ssh_match.group("path"), uri)

    if "://" in value:
        parsed = urlparse(value)
        if not parsed.netloc:
            raise RepositoryURIError(f"Invalid repository URI '{uri}'")
        api_url = parsed.netloc.lower().startswith("api.") or parsed.path.startswith(
            "/api/v3/"
        )
        return _split_path(parsed.path, uri, api_url=api_url)

    # Bare owner/repo must be exactly two segments
    if value.count("/") != 1:
        raise RepositoryURIError(f"Cannot determine owner/repo from '{uri}'")
    return _split_path(value, uri)
