"""
Fork scenarios.

Two scenarios exercise fork creation: one forks into the acting user's
namespace, the other into an organization. Each runs setup, act, assert and
teardown once; the whole run is wrapped in a configuration snapshot that is
restored on every exit path.
"""

import logging
import os
import tempfile
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..api_clients.base_client import APIClientError
from ..config.config_manager import ConfigManager, GitHubConfiguration
from ..config.snapshot import save_snapshot, take_snapshot
from ..logging_utils import (
    clear_correlation_id,
    format_error_log,
    get_log_extra,
    set_correlation_id,
)
from ..models.fork import Fork, ForkSort
from .fork_lifecycle import ForkAssertionError, ForkLifecycleHarness, TeardownError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_OWNER = "Microsoft"
DEFAULT_SOURCE_REPO = "PowerShellForGitHub"


@dataclass(frozen=True)
class ForkScenario:
    """A fork of ``source_owner/source_repo`` into one namespace."""

    name: str
    source_owner: str = DEFAULT_SOURCE_OWNER
    source_repo: str = DEFAULT_SOURCE_REPO
    organization: Optional[str] = None

    def expected_full_name(self, acting_user: str) -> str:
        namespace = self.organization or acting_user
        return f"{namespace}/{self.source_repo}"


@dataclass
class ScenarioResult:
    """Outcome of one scenario run."""

    name: str
    expected_full_name: str
    passed: bool
    listed_full_names: List[str] = field(default_factory=list)
    message: Optional[str] = None
    teardown_ok: bool = True
    fork: Optional[Fork] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "expected_full_name": self.expected_full_name,
            "passed": self.passed,
            "listed_count": len(self.listed_full_names),
            "message": self.message,
            "teardown_ok": self.teardown_ok,
            "fork": self.fork.to_dict() if self.fork else None,
        }


def default_scenarios(
    organization: Optional[str] = None,
    source_owner: str = DEFAULT_SOURCE_OWNER,
    source_repo: str = DEFAULT_SOURCE_REPO,
) -> List[ForkScenario]:
    """The user-namespace scenario, plus the organization one if given."""
    scenarios = [
        ForkScenario(
            name="fork-to-user",
            source_owner=source_owner,
            source_repo=source_repo,
        )
    ]
    if organization:
        scenarios.append(
            ForkScenario(
                name="fork-to-organization",
                source_owner=source_owner,
                source_repo=source_repo,
                organization=organization,
            )
        )
    return scenarios


def run_scenario(
    harness: ForkLifecycleHarness, scenario: ForkScenario, acting_user: str
) -> ScenarioResult:
    """
    Run one scenario: create fork, list newest-first, assert, delete.

    API and assertion failures fail the scenario and are reported on the
    result; they do not propagate.
    """
    expected = scenario.expected_full_name(acting_user)
    result = ScenarioResult(
        name=scenario.name, expected_full_name=expected, passed=False
    )
    failures_before = len(harness.teardown_failures)

    # Failure inside the fixture; reported together with any teardown error
    act_error: Optional[Exception] = None

    set_correlation_id(f"{scenario.name}-{uuid.uuid4().hex[:8]}")
    try:
        with harness.fork_fixture(
            scenario.source_owner,
            scenario.source_repo,
            organization=scenario.organization,
        ) as fork:
            result.fork = fork
            try:
                forks = harness.list_forks(
                    scenario.source_owner, scenario.source_repo, sort=ForkSort.NEWEST
                )
                result.listed_full_names = [f.full_name for f in forks]
                harness.assert_contains(forks, expected)
            except (ForkAssertionError, APIClientError) as e:
                act_error = e
        if act_error is not None:
            raise act_error
        result.passed = True
    except (ForkAssertionError, TeardownError, APIClientError) as e:
        if act_error is not None and e is not act_error:
            result.message = f"{act_error}; {e}"
        else:
            result.message = str(e)
        logger.warning(
            format_error_log(
                "FORK-SCENARIO-001", "Scenario failed", scenario=scenario.name, error=e
            ),
            extra=get_log_extra("FORK-SCENARIO-001"),
        )
    finally:
        clear_correlation_id()

    result.teardown_ok = len(harness.teardown_failures) == failures_before
    if result.passed:
        logger.info(f"Scenario {scenario.name} passed: {expected} listed")
    return result


def run_scenarios(
    harness: ForkLifecycleHarness,
    scenarios: Sequence[ForkScenario],
    config_manager: ConfigManager,
    session_config: Optional[GitHubConfiguration] = None,
    backup_path: Optional[Union[str, Path]] = None,
) -> List[ScenarioResult]:
    """
    Run scenarios in order with the configuration file preserved.

    The configuration file is snapshotted to ``backup_path`` (a temporary
    file when not given) before anything runs and restored from it
    afterwards, even if a scenario raises.

    Args:
        harness: Harness performing the remote calls
        scenarios: Scenarios to run, in order
        config_manager: Owner of the configuration file to preserve
        session_config: Configuration to persist for the duration of the run
        backup_path: Where to keep the snapshot

    Returns:
        One result per scenario
    """
    snapshot = take_snapshot(config_manager.config_file_path)

    temporary_backup = backup_path is None
    if backup_path is None:
        fd, tmp_name = tempfile.mkstemp(prefix="github-forks-", suffix=".json")
        os.close(fd)
        target = Path(tmp_name)
    else:
        target = Path(backup_path)
    backup = save_snapshot(snapshot, target)

    results: List[ScenarioResult] = []
    try:
        if session_config is not None:
            config_manager.save_config(session_config)

        acting_user = harness.acting_user()
        for scenario in scenarios:
            results.append(run_scenario(harness, scenario, acting_user))
    finally:
        harness.restore_configuration(backup)
        if temporary_backup:
            backup.unlink(missing_ok=True)

    return results
