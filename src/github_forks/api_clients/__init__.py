"""GitHub REST API clients for github-forks."""

from .base_client import (
    APIClientError,
    AuthenticationError,
    GitHubAPIClient,
    NetworkError,
    NotFoundError,
)
from .fork_client import ForkAPIClient
from .network_error_handler import (
    NetworkConnectionError,
    NetworkTimeoutError,
    RateLimitError,
    ServerError,
)
from .repository_uri import RepositoryURIError, resolve_repository_uri

__all__ = [
    "APIClientError",
    "AuthenticationError",
    "ForkAPIClient",
    "GitHubAPIClient",
    "NetworkConnectionError",
    "NetworkError",
    "NetworkTimeoutError",
    "NotFoundError",
    "RateLimitError",
    "RepositoryURIError",
    "ServerError",
    "resolve_repository_uri",
]
