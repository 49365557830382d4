"""
Configuration Management for github-forks.

Handles configuration creation, validation, environment variable overrides,
and JSON persistence. Configuration values are immutable: every change
produces a new GitHubConfiguration.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging_utils import format_error_log

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "GITHUB_FORKS_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(ValueError):
    """Raised when a configuration file or value is invalid."""

    pass


@dataclass(frozen=True)
class GitHubConfiguration:
    """Settings the GitHub client and fork lifecycle depend on."""

    api_host_name: str = "github.com"
    access_token: Optional[str] = None
    default_owner_name: Optional[str] = None
    default_organization_name: Optional[str] = None
    # Applied as the httpx timeout for every request
    web_request_timeout_sec: int = 30
    log_level: str = "INFO"

    @property
    def api_base_url(self) -> str:
        """REST API root for the configured host."""
        host = self.api_host_name.strip().rstrip("/")
        if host in ("github.com", "api.github.com"):
            return "https://api.github.com"
        # GitHub Enterprise Server serves the REST API under /api/v3
        return f"https://{host}/api/v3"

    def with_changes(self, **changes: Any) -> "GitHubConfiguration":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def masked(self) -> Dict[str, Any]:
        """Dictionary form with the access token hidden, for display."""
        data = self.to_dict()
        if data.get("access_token"):
            data["access_token"] = "********"
        return data


class ConfigManager:
    """
    Manages github-forks configuration.

    Handles configuration creation, validation, file persistence and
    environment variable overrides.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory (defaults to
                GITHUB_FORKS_CONFIG_DIR env var or ~/.github-forks)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            default_dir = os.environ.get(
                CONFIG_DIR_ENV, str(Path.home() / ".github-forks")
            )
            self.config_dir = Path(default_dir)

        self.config_file_path = self.config_dir / CONFIG_FILE_NAME

    def create_default_config(self) -> GitHubConfiguration:
        """Create default configuration."""
        return GitHubConfiguration()

    def save_config(self, config: GitHubConfiguration) -> None:
        """
        Save configuration to file.

        Args:
            config: GitHubConfiguration to save
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file_path, "w") as f:
            json.dump(config.to_dict(), f, indent=2)

    def load_config(self) -> Optional[GitHubConfiguration]:
        """
        Load configuration from file.

        Returns:
            GitHubConfiguration if file exists, None otherwise

        Raises:
            ConfigurationError: If configuration file is malformed
        """
        if not self.config_file_path.exists():
            return None

        try:
            with open(self.config_file_path, "r") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration file: {e}")

        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Invalid configuration format in {self.config_file_path}"
            )

        known = {f.name for f in fields(GitHubConfiguration)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            )

        for key, value in config_dict.items():
            if key == "web_request_timeout_sec":
                # bool is an int subclass
                valid = isinstance(value, int) and not isinstance(value, bool)
            elif key in ("api_host_name", "log_level"):
                valid = isinstance(value, str)
            else:
                valid = value is None or isinstance(value, str)
            if not valid:
                raise ConfigurationError(
                    f"Invalid value for {key} in {self.config_file_path}: {value!r}"
                )

        try:
            return GitHubConfiguration(**config_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")

    def reset_config(self) -> None:
        """Remove the configuration file, returning to defaults."""
        if self.config_file_path.exists():
            self.config_file_path.unlink()
            logger.info(f"Removed configuration file {self.config_file_path}")

    def apply_env_overrides(self, config: GitHubConfiguration) -> GitHubConfiguration:
        """
        Apply environment variable overrides to configuration.

        Supported environment variables:
        - GITHUB_TOKEN: Override access token
        - GITHUB_FORKS_API_HOST: Override API host name
        - GITHUB_FORKS_TIMEOUT: Override request timeout (seconds)
        - GITHUB_FORKS_LOG_LEVEL: Override log level

        Args:
            config: Base configuration to apply overrides to

        Returns:
            New configuration with environment overrides
        """
        changes: Dict[str, Any] = {}

        if token_env := os.environ.get("GITHUB_TOKEN"):
            changes["access_token"] = token_env

        if host_env := os.environ.get("GITHUB_FORKS_API_HOST"):
            changes["api_host_name"] = host_env

        if timeout_env := os.environ.get("GITHUB_FORKS_TIMEOUT"):
            try:
                changes["web_request_timeout_sec"] = int(timeout_env)
            except ValueError:
                logger.warning(
                    format_error_log(
                        "FORK-CONFIG-001",
                        f"Invalid GITHUB_FORKS_TIMEOUT environment variable value "
                        f"'{timeout_env}'. Using {config.web_request_timeout_sec}s",
                    )
                )

        if log_level_env := os.environ.get("GITHUB_FORKS_LOG_LEVEL"):
            changes["log_level"] = log_level_env.upper()

        return config.with_changes(**changes) if changes else config

    def validate_config(self, config: GitHubConfiguration) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If any configuration value is invalid
        """
        if not config.api_host_name or not config.api_host_name.strip():
            raise ConfigurationError("api_host_name must not be empty")

        if not isinstance(config.web_request_timeout_sec, int) or not (
            1 <= config.web_request_timeout_sec <= 600
        ):
            raise ConfigurationError(
                f"web_request_timeout_sec must be between 1 and 600, "
                f"got {config.web_request_timeout_sec}"
            )

        if config.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got {config.log_level}"
            )

    def get_effective_config(self) -> GitHubConfiguration:
        """Load (or default), apply environment overrides, and validate."""
        config = self.load_config() or self.create_default_config()
        config = self.apply_env_overrides(config)
        self.validate_config(config)
        return config

    def set_value(self, key: str, value: str) -> GitHubConfiguration:
        """
        Persist a single configuration value given as a string.

        Returns:
            The saved configuration

        Raises:
            ConfigurationError: If the key is unknown or the value invalid
        """
        field_types = {f.name: f.type for f in fields(GitHubConfiguration)}
        if key not in field_types:
            raise ConfigurationError(f"Unknown configuration key: {key}")

        converted: Any = value
        if key == "web_request_timeout_sec":
            try:
                converted = int(value)
            except ValueError:
                raise ConfigurationError(
                    f"web_request_timeout_sec must be an integer, got '{value}'"
                )
        elif key == "log_level":
            converted = value.upper()
        elif value == "":
            converted = None

        config = self.load_config() or self.create_default_config()
        config = config.with_changes(**{key: converted})
        self.validate_config(config)
        self.save_config(config)
        return config
