"""Tests for the Fork model and ForkSort enum."""

import pytest

from github_forks.models.fork import Fork, ForkSort


class TestForkFromApi:
    """Tests for building a Fork from a GitHub repository payload."""

    def test_from_api_reads_identity_fields(self):
        """Test full_name, svn_url and owner are taken from the payload."""
        payload = {
            "name": "PowerShellForGitHub",
            "full_name": "octocat/PowerShellForGitHub",
            "owner": {"login": "octocat"},
            "html_url": "https://github.com/octocat/PowerShellForGitHub",
            "svn_url": "https://github.com/octocat/PowerShellForGitHub",
            "clone_url": "https://github.com/octocat/PowerShellForGitHub.git",
            "created_at": "2024-01-15T10:30:00Z",
        }

        fork = Fork.from_api(payload)

        assert fork.full_name == "octocat/PowerShellForGitHub"
        assert fork.svn_url == "https://github.com/octocat/PowerShellForGitHub"
        assert fork.owner_login == "octocat"
        assert fork.name == "PowerShellForGitHub"
        assert fork.namespace == "octocat"
        assert fork.created_at is not None
        assert fork.created_at.year == 2024
        assert fork.raw == payload

    def test_from_api_falls_back_to_html_url(self):
        """Test svn_url defaults to html_url when the host omits it."""
        fork = Fork.from_api(
            {
                "full_name": "octo-org/repo",
                "html_url": "https://ghe.example.com/octo-org/repo",
            }
        )

        assert fork.svn_url == "https://ghe.example.com/octo-org/repo"
        assert fork.name == "repo"

    def test_from_api_tolerates_bad_timestamp(self):
        """Test an unparseable created_at becomes None."""
        fork = Fork.from_api(
            {"full_name": "a/b", "svn_url": "https://github.com/a/b", "created_at": "soon"}
        )

        assert fork.created_at is None

    def test_from_api_requires_full_name(self):
        """Test a payload without full_name is rejected."""
        with pytest.raises(ValueError, match="full_name"):
            Fork.from_api({"name": "repo"})

    def test_raw_payload_excluded_from_equality(self):
        """Test two forks with the same fields compare equal."""
        first = Fork.from_api({"full_name": "a/b", "svn_url": "u", "extra": 1})
        second = Fork.from_api({"full_name": "a/b", "svn_url": "u", "extra": 2})

        assert first == second

    def test_to_dict_is_json_friendly(self):
        """Test to_dict renders created_at as ISO text."""
        fork = Fork.from_api(
            {
                "full_name": "a/b",
                "svn_url": "https://github.com/a/b",
                "created_at": "2024-01-15T10:30:00Z",
            }
        )

        data = fork.to_dict()

        assert data["full_name"] == "a/b"
        assert data["created_at"].startswith("2024-01-15T10:30:00")


class TestForkSort:
    """Tests for ForkSort values."""

    def test_values_match_api_parameters(self):
        """Test enum values are the strings the API accepts."""
        assert [s.value for s in ForkSort] == [
            "newest",
            "oldest",
            "stargazers",
            "watchers",
        ]

    def test_constructible_from_string(self):
        """Test CLI strings convert to ForkSort."""
        assert ForkSort("newest") is ForkSort.NEWEST
