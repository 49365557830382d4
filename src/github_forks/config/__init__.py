"""Configuration persistence and snapshots for github-forks."""

from .config_manager import (
    ConfigManager,
    ConfigurationError,
    GitHubConfiguration,
)
from .snapshot import (
    ConfigurationSnapshot,
    load_snapshot,
    preserved_configuration,
    restore_snapshot,
    save_snapshot,
    take_snapshot,
)

__all__ = [
    "ConfigManager",
    "ConfigurationError",
    "GitHubConfiguration",
    "ConfigurationSnapshot",
    "load_snapshot",
    "preserved_configuration",
    "restore_snapshot",
    "save_snapshot",
    "take_snapshot",
]
