"""Fork lifecycle harness and scenarios."""

from .fork_lifecycle import ForkAssertionError, ForkLifecycleHarness, TeardownError
from .scenarios import (
    DEFAULT_SOURCE_OWNER,
    DEFAULT_SOURCE_REPO,
    ForkScenario,
    ScenarioResult,
    default_scenarios,
    run_scenario,
    run_scenarios,
)

__all__ = [
    "DEFAULT_SOURCE_OWNER",
    "DEFAULT_SOURCE_REPO",
    "ForkAssertionError",
    "ForkLifecycleHarness",
    "ForkScenario",
    "ScenarioResult",
    "TeardownError",
    "default_scenarios",
    "run_scenario",
    "run_scenarios",
]
