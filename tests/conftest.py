"""Shared fixtures for github-forks tests.

Provides FakeGitHub, an in-memory stand-in for the GitHub REST endpoints the
fork lifecycle uses. It is served through httpx.MockTransport so clients run
their real request, error-mapping and pagination code without network access.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest

from github_forks.config.config_manager import GitHubConfiguration

API_ROOT = "https://api.github.com"
TEST_TOKEN = "ghp_test123"


class FakeGitHub:
    """In-memory GitHub serving repos, forks, /user and deletes.

    Failure injection:
    - ``delete_status``: status returned by every DELETE instead of 204
    - ``fork_status``: status returned by every fork POST instead of 202
    - ``hide_forks_in_listing``: created forks are not listed
    - ``rate_limited``: every request answers 403 with exhausted rate limit
    """

    def __init__(self, login: str = "octocat", token: str = TEST_TOKEN):
        self.login = login
        self.token = token
        self.organizations = {"octo-org"}
        self.repos: Dict[str, Dict[str, Any]] = {}
        self.forks: Dict[str, List[str]] = {}
        self.requests: List[httpx.Request] = []
        self.max_per_page = 100
        self.delete_status: Optional[int] = None
        self.fork_status: Optional[int] = None
        self.hide_forks_in_listing = False
        self.rate_limited = False
        self._clock = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

        self.add_repo("Microsoft", "PowerShellForGitHub")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _repo_payload(self, owner: str, name: str) -> Dict[str, Any]:
        self._clock += timedelta(minutes=1)
        return {
            "name": name,
            "full_name": f"{owner}/{name}",
            "owner": {"login": owner},
            "html_url": f"https://github.com/{owner}/{name}",
            "svn_url": f"https://github.com/{owner}/{name}",
            "clone_url": f"https://github.com/{owner}/{name}.git",
            "created_at": self._clock.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "stargazers_count": 0,
            "fork": False,
        }

    def add_repo(self, owner: str, name: str) -> Dict[str, Any]:
        payload = self._repo_payload(owner, name)
        self.repos[f"{owner}/{name}".lower()] = payload
        return payload

    def add_existing_fork(self, source: str, namespace: str) -> Dict[str, Any]:
        name = source.split("/", 1)[1]
        payload = self.add_repo(namespace, name)
        payload["fork"] = True
        self.forks.setdefault(source.lower(), []).append(payload["full_name"])
        return payload

    def has_repo(self, full_name: str) -> bool:
        return full_name.lower() in self.repos

    # Request handling

    def _json(self, status: int, data: Any, headers: Optional[dict] = None):
        return httpx.Response(status, json=data, headers=headers)

    def _authorized(self, request: httpx.Request) -> bool:
        return request.headers.get("Authorization") == f"Bearer {self.token}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.rate_limited:
            return self._json(
                403,
                {"message": "API rate limit exceeded"},
                headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "0"},
            )

        parts = [p for p in request.url.path.split("/") if p]

        if parts == ["user"]:
            if not self._authorized(request):
                return self._json(401, {"message": "Requires authentication"})
            return self._json(200, {"login": self.login})

        if len(parts) >= 3 and parts[0] == "repos":
            full_name = f"{parts[1]}/{parts[2]}"
            if len(parts) == 4 and parts[3] == "forks":
                if request.method == "POST":
                    return self._create_fork(request, full_name)
                if request.method == "GET":
                    return self._list_forks(request, full_name)
            if len(parts) == 3:
                if request.method == "GET":
                    return self._get_repo(full_name)
                if request.method == "DELETE":
                    return self._delete_repo(request, full_name)

        return self._json(404, {"message": "Not Found"})

    def _get_repo(self, full_name: str) -> httpx.Response:
        payload = self.repos.get(full_name.lower())
        if payload is None:
            return self._json(404, {"message": "Not Found"})
        return self._json(200, payload)

    def _create_fork(self, request: httpx.Request, source: str) -> httpx.Response:
        if not self._authorized(request):
            return self._json(401, {"message": "Bad credentials"})
        if self.fork_status is not None:
            return self._json(self.fork_status, {"message": "Fork failed"})
        if not self.has_repo(source):
            return self._json(404, {"message": "Not Found"})

        body = json.loads(request.content or b"{}")
        namespace = body.get("organization") or self.login
        if body.get("organization") and namespace not in self.organizations:
            return self._json(404, {"message": "Not Found"})

        name = source.split("/", 1)[1]
        fork_name = f"{namespace}/{name}"
        if not self.has_repo(fork_name):
            payload = self.add_repo(namespace, name)
            payload["fork"] = True
            if not self.hide_forks_in_listing:
                self.forks.setdefault(source.lower(), []).append(fork_name)
        return self._json(202, self.repos[fork_name.lower()])

    def _list_forks(self, request: httpx.Request, source: str) -> httpx.Response:
        if not self.has_repo(source):
            return self._json(404, {"message": "Not Found"})

        sort = request.url.params.get("sort", "newest")
        per_page = min(int(request.url.params.get("per_page", 30)), self.max_per_page)
        page = int(request.url.params.get("page", 1))

        payloads = [
            self.repos[name.lower()]
            for name in self.forks.get(source.lower(), [])
            if self.has_repo(name)
        ]
        payloads.sort(key=lambda p: p["created_at"], reverse=(sort == "newest"))

        start = (page - 1) * per_page
        items = payloads[start : start + per_page]

        headers = {}
        if start + per_page < len(payloads):
            next_url = request.url.copy_set_param("page", str(page + 1))
            headers["Link"] = f'<{next_url}>; rel="next"'
        return self._json(200, items, headers=headers)

    def _delete_repo(self, request: httpx.Request, full_name: str) -> httpx.Response:
        if not self._authorized(request):
            return self._json(401, {"message": "Bad credentials"})
        if self.delete_status is not None:
            return self._json(self.delete_status, {"message": "Must have admin rights"})
        if self.repos.pop(full_name.lower(), None) is None:
            return self._json(404, {"message": "Not Found"})
        return httpx.Response(204)


@pytest.fixture
def fake_github():
    """Fresh FakeGitHub for each test."""
    return FakeGitHub()


@pytest.fixture
def github_config():
    """Configuration authenticated against FakeGitHub."""
    return GitHubConfiguration(access_token=TEST_TOKEN)


@pytest.fixture
def fork_client(fake_github, github_config):
    """ForkAPIClient wired to FakeGitHub."""
    from github_forks.api_clients.fork_client import ForkAPIClient

    client = ForkAPIClient(github_config, transport=fake_github.transport)
    yield client
    client.close()
