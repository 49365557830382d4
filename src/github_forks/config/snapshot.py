"""
Configuration snapshots.

A snapshot captures the configuration file as it was at one point in time,
including the case where no file existed, so it can be put back exactly.
Snapshots can be kept in memory or written to a backup file.
"""

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from ..logging_utils import format_error_log, get_log_extra
from .config_manager import ConfigurationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Contents of a configuration file at a point in time.

    ``content`` is None when the file did not exist.
    """

    config_path: Path
    content: Optional[str]

    @property
    def existed(self) -> bool:
        return self.content is not None


def take_snapshot(config_path: PathLike) -> ConfigurationSnapshot:
    """Capture the current state of ``config_path``."""
    path = Path(config_path)
    content = path.read_text(encoding="utf-8") if path.exists() else None
    return ConfigurationSnapshot(config_path=path, content=content)


def restore_snapshot(snapshot: ConfigurationSnapshot) -> None:
    """Put the configuration file back to the captured state.

    Removes the file when it did not exist at capture time.
    """
    path = snapshot.config_path
    if snapshot.content is None:
        if path.exists():
            path.unlink()
        logger.debug(f"Restored absent configuration at {path}")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.content, encoding="utf-8")
    logger.debug(f"Restored configuration at {path}")


def save_snapshot(snapshot: ConfigurationSnapshot, backup_path: PathLike) -> Path:
    """Write a snapshot to ``backup_path`` and return the path."""
    target = Path(backup_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w") as f:
        json.dump(
            {"config_path": str(snapshot.config_path), "content": snapshot.content},
            f,
            indent=2,
        )
    return target


def load_snapshot(backup_path: PathLike) -> ConfigurationSnapshot:
    """Read a snapshot written by :func:`save_snapshot`.

    Raises:
        ConfigurationError: If the backup is missing or malformed
    """
    source = Path(backup_path)
    if not source.exists():
        raise ConfigurationError(f"Configuration backup not found at {source}")

    try:
        with open(source, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration backup {source}: {e}")

    if not isinstance(data, dict) or "config_path" not in data:
        raise ConfigurationError(f"Invalid configuration backup {source}")

    content = data.get("content")
    if content is not None and not isinstance(content, str):
        raise ConfigurationError(f"Invalid configuration backup {source}")

    return ConfigurationSnapshot(config_path=Path(data["config_path"]), content=content)


@contextmanager
def preserved_configuration(config_path: PathLike) -> Iterator[ConfigurationSnapshot]:
    """Snapshot ``config_path`` and restore it on every exit path."""
    snapshot = take_snapshot(config_path)
    try:
        yield snapshot
    finally:
        try:
            restore_snapshot(snapshot)
        except OSError as e:
            logger.error(
                format_error_log(
                    "FORK-CONFIG-003",
                    "Failed to restore configuration",
                    path=snapshot.config_path,
                    error=e,
                ),
                extra=get_log_extra("FORK-CONFIG-003"),
            )
            raise
