"""User-facing error messages for github-forks CLI commands."""

from typing import Tuple


def _get_error_message(error: Exception) -> Tuple[str, str]:
    """Get base message and verbose details for an error.

    Returns:
        Tuple of (base_message, verbose_details)
    """
    from ..api_clients.base_client import (
        APIClientError,
        AuthenticationError,
        NotFoundError,
    )
    from ..api_clients.network_error_handler import (
        NetworkConnectionError,
        NetworkTimeoutError,
        RateLimitError,
        ServerError,
    )
    from ..api_clients.repository_uri import RepositoryURIError
    from ..config.config_manager import ConfigurationError

    error_msg = str(error)

    if isinstance(error, AuthenticationError):
        return (
            f"Authentication failed: {error_msg}",
            "Set a token with 'gh-forks config set access_token <token>' "
            "or the GITHUB_TOKEN environment variable.",
        )

    if isinstance(error, RateLimitError):
        return (
            f"Rate limited: {error_msg}",
            f"Please wait {error.retry_after} seconds before trying again.",
        )

    if isinstance(error, NotFoundError):
        return (
            f"Not found: {error_msg}",
            "Check the owner and repository names and the token's access.",
        )

    if isinstance(error, NetworkTimeoutError):
        return (
            f"Request timed out: {error_msg}",
            "Increase web_request_timeout_sec or try again later.",
        )

    if isinstance(error, NetworkConnectionError):
        return (
            f"Network connection error: {error_msg}",
            "Check your network connection and api_host_name.",
        )

    if isinstance(error, ServerError):
        return (
            f"Server error (HTTP {error.status_code}): {error_msg}",
            "GitHub encountered an internal error. Please try again later.",
        )

    if isinstance(error, APIClientError):
        status = error.status_code
        base = (
            f"API error (HTTP {status}): {error_msg}"
            if status
            else f"API error: {error_msg}"
        )
        return (base, "")

    if isinstance(error, RepositoryURIError):
        return (f"Invalid repository: {error_msg}", "Use owner/repo or a repository URL.")

    if isinstance(error, ConfigurationError):
        return (f"Configuration error: {error_msg}", "")

    return (f"Unexpected error: {error_msg}", f"Error type: {type(error).__name__}")


def handle_api_error(error: Exception, verbose: bool = False) -> str:
    """Format API errors for user-friendly display.

    Args:
        error: The exception that occurred
        verbose: Include additional details if True

    Returns:
        Formatted error message string
    """
    base_msg, verbose_detail = _get_error_message(error)
    if verbose and verbose_detail:
        return f"{base_msg}\n{verbose_detail}"
    return base_msg
