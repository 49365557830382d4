"""
Base GitHub REST API client for github-forks.

Wraps an httpx.Client configured from GitHubConfiguration: base URL, auth
headers and timeout. Maps transport and HTTP failures to the typed errors
the rest of the package handles, and follows Link-header pagination.
"""

import logging
import re
from typing import Any, Dict, Iterator, List, Optional

import httpx

from ..config.config_manager import GitHubConfiguration
from ..logging_utils import format_error_log, get_log_extra, sanitize_for_logging

logger = logging.getLogger(__name__)

_NEXT_LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')


class APIClientError(Exception):
    """Base exception for GitHub API failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIClientError):
    """Missing, invalid or insufficient credentials (401/403)."""

    pass


class NotFoundError(APIClientError):
    """Requested repository or user does not exist (404)."""

    def __init__(self, message: str, status_code: Optional[int] = 404):
        super().__init__(message, status_code)


class NetworkError(APIClientError):
    """Request never produced an HTTP response."""

    pass


def parse_next_link(link_header: Optional[str]) -> Optional[str]:
    """
    Extract the rel="next" URL from a GitHub Link header.

    GitHub pagination uses Link header format:
    <url?page=2>; rel="next", <url?page=5>; rel="last"

    Returns:
        The next page URL, or None on the last page
    """
    if not link_header:
        return None

    match = _NEXT_LINK_PATTERN.search(link_header)
    return match.group(1) if match else None


class GitHubAPIClient:
    """Synchronous GitHub REST API client."""

    API_VERSION = "2022-11-28"
    PER_PAGE = 100

    def __init__(
        self,
        config: GitHubConfiguration,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            config: Configuration supplying host, token and timeout
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.config = config
        self._client = httpx.Client(
            base_url=config.api_base_url,
            headers=self._default_headers(),
            timeout=config.web_request_timeout_sec,
            transport=transport,
        )

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
            "User-Agent": "github-forks",
        }
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    @property
    def is_authenticated(self) -> bool:
        """Whether an access token is configured."""
        return bool(self.config.access_token)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubAPIClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        requires_auth: bool = False,
    ) -> httpx.Response:
        """
        Make an API request and raise a typed error on failure.

        Args:
            method: HTTP method
            endpoint: Path relative to the API root, or an absolute URL
            operation: Operation description for error messages
            params: Query parameters
            json: JSON request body
            requires_auth: Fail fast when no token is configured

        Returns:
            Successful HTTP response

        Raises:
            APIClientError: Or a subclass describing the failure
        """
        from .network_error_handler import raise_for_response, translate_transport_error

        if requires_auth and not self.is_authenticated:
            raise AuthenticationError(
                f"Cannot {operation}: GitHub access token not configured"
            )

        logger.debug(
            f"{method} {endpoint} params={sanitize_for_logging(params)} "
            f"body={sanitize_for_logging(json)}"
        )

        try:
            response = self._client.request(method, endpoint, params=params, json=json)
        except httpx.HTTPError as e:
            error = translate_transport_error(e, operation)
            logger.warning(
                format_error_log("FORK-API-001", str(error), endpoint=endpoint),
                extra=get_log_extra("FORK-API-001"),
            )
            raise error from e

        raise_for_response(response, operation)
        return response

    def _paginate(
        self,
        endpoint: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield items from every page of a list endpoint, lazily."""
        page_params: Optional[Dict[str, Any]] = {"per_page": self.PER_PAGE}
        if params:
            page_params.update(params)

        url: Optional[str] = endpoint
        while url:
            response = self._request("GET", url, operation, params=page_params)
            items = response.json()
            if not isinstance(items, list):
                raise APIClientError(
                    f"Failed to {operation}: expected a JSON list",
                    response.status_code,
                )
            for item in items:
                yield item

            url = parse_next_link(response.headers.get("Link"))
            # The next link already carries the query string
            page_params = None

    def _get_list(
        self,
        endpoint: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        return list(self._paginate(endpoint, operation, params))
