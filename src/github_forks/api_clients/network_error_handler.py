"""
Error translation for GitHub API responses and transport failures.

Turns httpx exceptions and non-2xx responses into the APIClientError
hierarchy. Nothing here retries; callers see the first failure.
"""

import time
from typing import Optional

import httpx

from .base_client import (
    APIClientError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
)


class NetworkConnectionError(NetworkError):
    """Connection could not be established or was dropped."""

    pass


class NetworkTimeoutError(NetworkError):
    """Request exceeded the configured timeout."""

    pass


class ServerError(APIClientError):
    """GitHub answered with a 5xx status."""

    pass


class RateLimitError(APIClientError):
    """Primary or secondary rate limit exceeded."""

    def __init__(
        self, message: str, status_code: Optional[int] = 403, retry_after: int = 60
    ):
        super().__init__(message, status_code)
        self.retry_after = retry_after


def translate_transport_error(error: httpx.HTTPError, operation: str) -> NetworkError:
    """Map an httpx transport exception to a NetworkError subclass."""
    if isinstance(error, httpx.TimeoutException):
        return NetworkTimeoutError(f"Timed out trying to {operation}: {error}")
    return NetworkConnectionError(f"Could not {operation}: {error}")


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {response.status_code}"


def _retry_after_seconds(response: httpx.Response) -> Optional[int]:
    """Seconds until the rate limit lifts, if the response says so."""
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return int(retry_after)
        except ValueError:
            pass

    if response.headers.get("X-RateLimit-Remaining") == "0":
        reset_time = response.headers.get("X-RateLimit-Reset", "")
        try:
            return max(int(reset_time) - int(time.time()), 0)
        except ValueError:
            return 60

    return None


def raise_for_response(response: httpx.Response, operation: str) -> None:
    """
    Raise the typed error matching a failed response.

    Args:
        response: HTTP response to check
        operation: Operation description for error messages

    Raises:
        AuthenticationError: 401, or 403 that is not a rate limit
        NotFoundError: 404
        RateLimitError: 403/429 with rate limit headers
        ServerError: 5xx
        APIClientError: Any other non-2xx status
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    detail = _error_detail(response)
    message = f"Failed to {operation}: {detail}"

    if status in (403, 429):
        retry_after = _retry_after_seconds(response)
        if retry_after is not None or status == 429:
            raise RateLimitError(
                f"GitHub API rate limit exceeded while trying to {operation}",
                status,
                retry_after=retry_after if retry_after is not None else 60,
            )

    if status in (401, 403):
        raise AuthenticationError(message, status)
    if status == 404:
        raise NotFoundError(message, status)
    if status >= 500:
        raise ServerError(message, status)

    raise APIClientError(message, status)
