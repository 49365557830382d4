"""
Tests for the fork scenarios.

Scenario A forks into the acting user's namespace, scenario B into an
organization; both against FakeGitHub.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from github_forks.api_clients.network_error_handler import ServerError
from github_forks.config.config_manager import ConfigManager, GitHubConfiguration
from github_forks.config.snapshot import save_snapshot
from github_forks.harness.fork_lifecycle import ForkLifecycleHarness
from github_forks.harness.scenarios import (
    ForkScenario,
    default_scenarios,
    run_scenario,
    run_scenarios,
)
from github_forks.logging_utils import get_correlation_id


@pytest.fixture
def harness(fork_client):
    return ForkLifecycleHarness(fork_client)


class TestDefaultScenarios:
    """Tests for default_scenarios."""

    def test_user_only_without_organization(self):
        """Test only the user scenario runs when no organization is given."""
        scenarios = default_scenarios()

        assert [s.name for s in scenarios] == ["fork-to-user"]
        assert scenarios[0].source_owner == "Microsoft"
        assert scenarios[0].source_repo == "PowerShellForGitHub"

    def test_organization_adds_second_scenario(self):
        """Test an organization adds the organization scenario."""
        scenarios = default_scenarios("octo-org")

        assert [s.name for s in scenarios] == ["fork-to-user", "fork-to-organization"]
        assert scenarios[1].organization == "octo-org"

    def test_expected_full_name(self):
        """Test the expected namespace is the organization or the user."""
        assert (
            ForkScenario(name="u").expected_full_name("octocat")
            == "octocat/PowerShellForGitHub"
        )
        assert (
            ForkScenario(name="o", organization="octo-org").expected_full_name("octocat")
            == "octo-org/PowerShellForGitHub"
        )


class TestRunScenario:
    """Tests for run_scenario."""

    def test_scenario_a_fork_as_user(self, harness, fake_github):
        """Test forking as user lists <user>/PowerShellForGitHub."""
        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is True
        assert result.expected_full_name == "octocat/PowerShellForGitHub"
        assert "octocat/PowerShellForGitHub" in result.listed_full_names
        assert result.teardown_ok is True
        assert not fake_github.has_repo("octocat/PowerShellForGitHub")

    def test_scenario_b_fork_to_organization(self, harness, fake_github):
        """Test forking into an organization lists <org>/PowerShellForGitHub."""
        scenario = ForkScenario(name="fork-to-organization", organization="octo-org")

        result = run_scenario(harness, scenario, "octocat")

        assert result.passed is True
        assert result.listed_full_names[0] == "octo-org/PowerShellForGitHub"
        assert not fake_github.has_repo("octo-org/PowerShellForGitHub")

    def test_missing_fork_fails_scenario_and_still_cleans_up(self, harness, fake_github):
        """Test an assertion failure is reported and the fork still deleted."""
        fake_github.hide_forks_in_listing = True

        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is False
        assert "octocat/PowerShellForGitHub" in result.message
        assert not fake_github.has_repo("octocat/PowerShellForGitHub")

    def test_api_error_fails_scenario(self, harness, fake_github):
        """Test an API error during creation fails only that scenario."""
        scenario = ForkScenario(name="bad-org", organization="not-my-org")

        result = run_scenario(harness, scenario, "octocat")

        assert result.passed is False
        assert result.fork is None
        assert "Not Found" in result.message

    def test_teardown_failure_is_recorded_but_not_fatal(self, harness, fake_github):
        """Test a failed delete leaves the scenario passed with teardown_ok False."""
        fake_github.delete_status = 403

        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is True
        assert result.teardown_ok is False

    def test_strict_teardown_failure_fails_scenario(self, fork_client, fake_github):
        """Test strict teardown turns a failed delete into a scenario failure."""
        harness = ForkLifecycleHarness(fork_client, strict_teardown=True)
        fake_github.delete_status = 403

        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is False
        assert result.teardown_ok is False
        assert "Failed to delete fork" in result.message

    def test_strict_teardown_keeps_assertion_failure(self, fork_client, fake_github):
        """Test a missing fork is still reported when strict teardown also fails."""
        harness = ForkLifecycleHarness(fork_client, strict_teardown=True)
        fake_github.hide_forks_in_listing = True
        fake_github.delete_status = 403

        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is False
        assert result.teardown_ok is False
        assert "not found among" in result.message
        assert "Failed to delete fork" in result.message

    def test_strict_teardown_keeps_listing_error(self, fork_client, fake_github):
        """Test a listing API error is still reported when strict teardown fails."""
        harness = ForkLifecycleHarness(fork_client, strict_teardown=True)
        fake_github.delete_status = 403

        with patch.object(
            harness, "list_forks", side_effect=ServerError("Listing unavailable", 502)
        ):
            result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert result.passed is False
        assert result.message.startswith("Listing unavailable")
        assert "Failed to delete fork" in result.message

    def test_correlation_id_cleared_after_run(self, harness):
        """Test the scenario correlation id does not leak."""
        run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        assert get_correlation_id() is None

    def test_to_dict(self, harness):
        """Test results serialize for JSON output."""
        result = run_scenario(harness, ForkScenario(name="fork-to-user"), "octocat")

        data = result.to_dict()

        assert data["passed"] is True
        assert data["fork"]["full_name"] == "octocat/PowerShellForGitHub"


class TestRunScenarios:
    """Tests for run_scenarios."""

    def test_runs_both_scenarios_and_deletes_each_fork(self, harness, fake_github, tmp_path):
        """Test each fork is deleted before the next scenario starts."""
        manager = ConfigManager(str(tmp_path))

        results = run_scenarios(harness, default_scenarios("octo-org"), manager)

        assert [r.passed for r in results] == [True, True]
        methods = [r.method for r in fake_github.requests]
        # user fork created and deleted before the organization fork is created
        first_delete = methods.index("DELETE")
        second_post = [i for i, m in enumerate(methods) if m == "POST"][1]
        assert first_delete < second_post

    def test_configuration_round_trip(self, harness, tmp_path):
        """Test configuration after the run equals configuration before it."""
        manager = ConfigManager(str(tmp_path))
        manager.save_config(GitHubConfiguration(default_owner_name="before"))
        before = manager.config_file_path.read_text()

        run_scenarios(
            harness,
            default_scenarios(),
            manager,
            session_config=GitHubConfiguration(default_owner_name="during"),
        )

        assert manager.config_file_path.read_text() == before

    def test_absent_configuration_stays_absent(self, harness, tmp_path):
        """Test a run that writes session config leaves no file behind."""
        manager = ConfigManager(str(tmp_path))

        run_scenarios(
            harness,
            default_scenarios(),
            manager,
            session_config=GitHubConfiguration(default_owner_name="during"),
        )

        assert not manager.config_file_path.exists()

    def test_configuration_restored_when_acting_user_fails(self, fake_github, tmp_path):
        """Test restore runs even if setup raises."""
        from github_forks.api_clients.base_client import AuthenticationError
        from github_forks.api_clients.fork_client import ForkAPIClient

        client = ForkAPIClient(
            GitHubConfiguration(access_token="ghp_wrong"),
            transport=fake_github.transport,
        )
        harness = ForkLifecycleHarness(client)
        manager = ConfigManager(str(tmp_path))

        with pytest.raises(AuthenticationError):
            run_scenarios(
                harness,
                default_scenarios(),
                manager,
                session_config=GitHubConfiguration(default_owner_name="during"),
            )

        assert not manager.config_file_path.exists()

    def test_backup_path_is_kept(self, harness, tmp_path):
        """Test an explicit backup path remains for inspection."""
        manager = ConfigManager(str(tmp_path / "cfg"))
        backup = tmp_path / "backup.json"

        run_scenarios(harness, default_scenarios(), manager, backup_path=backup)

        assert backup.exists()

    def test_unexpected_error_still_deletes_fork_and_restores(
        self, harness, fake_github, tmp_path
    ):
        """Test a non-API error propagates after cleanup and restore."""
        manager = ConfigManager(str(tmp_path))
        manager.save_config(GitHubConfiguration(default_owner_name="before"))
        before = manager.config_file_path.read_text()

        with patch.object(harness, "list_forks", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                run_scenarios(
                    harness,
                    default_scenarios(),
                    manager,
                    session_config=GitHubConfiguration(default_owner_name="during"),
                )

        assert manager.config_file_path.read_text() == before
        assert not fake_github.has_repo("octocat/PowerShellForGitHub")

    def test_temporary_backup_is_removed(self, harness, tmp_path):
        """Test the default temporary backup file is deleted afterwards."""
        manager = ConfigManager(str(tmp_path))
        created = []
        real_save = save_snapshot

        def recording_save(snapshot, path):
            created.append(Path(path))
            return real_save(snapshot, path)

        with patch("github_forks.harness.scenarios.save_snapshot", recording_save):
            run_scenarios(harness, default_scenarios(), manager)

        assert len(created) == 1
        assert not created[0].exists()
