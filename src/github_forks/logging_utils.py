"""
Logging utilities for github-forks.

Provides helper functions for formatting log messages with error codes,
correlation IDs, and sanitized data.

Usage:
    from github_forks.logging_utils import format_error_log, get_log_extra

    logger.warning(
        format_error_log("FORK-TEARDOWN-001", "Delete failed", uri=uri),
        extra=get_log_extra("FORK-TEARDOWN-001"),
    )
"""

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


# Sensitive field names that should be redacted in logs
SENSITIVE_FIELDS = {
    "password",
    "token",
    "access_token",
    "api_key",
    "secret",
    "authorization",
    "auth_token",
    "client_secret",
}

REDACTED = "***REDACTED***"

_correlation_id: ContextVar[Optional[str]] = ContextVar(
    "github_forks_correlation_id", default=None
)


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation id to the current execution context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Return the correlation id bound to the current context, if any."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Remove the correlation id from the current context."""
    _correlation_id.set(None)


def format_error_log(error_code: str, message: str, **context) -> str:
    """
    Format an error log message with error code and optional context.

    Args:
        error_code: Error code in format {SUBSYSTEM}-{CATEGORY}-{NUMBER}
        message: Human-readable error message
        **context: Additional context key-value pairs to include

    Returns:
        Formatted log message: "[{ERROR_CODE}] message key1=value1 key2=value2"

    Examples:
        >>> format_error_log("FORK-API-001", "Request failed", status=404)
        '[FORK-API-001] Request failed status=404'

        >>> format_error_log("FORK-CONFIG-002", "Config restored")
        '[FORK-CONFIG-002] Config restored'
    """
    parts = [f"[{error_code}]", message]

    if context:
        context_str = " ".join(f"{k}={v}" for k, v in context.items())
        parts.append(context_str)

    return " ".join(parts)


def get_log_extra(error_code: str) -> Dict[str, Any]:
    """
    Build the extra dict for logging with error_code and correlation_id.

    Args:
        error_code: Error code to include in extra dict

    Returns:
        Dictionary with error_code and correlation_id (if available)
    """
    extra: Dict[str, Any] = {"error_code": error_code}

    correlation_id = get_correlation_id()
    if correlation_id:
        extra["correlation_id"] = correlation_id

    return extra


def sanitize_for_logging(data: Any) -> Any:
    """
    Sanitize data for logging by redacting sensitive information.

    Nested dictionaries are sanitized recursively.

    Examples:
        >>> sanitize_for_logging({"owner": "octocat", "access_token": "ghp_x"})
        {'owner': 'octocat', 'access_token': '***REDACTED***'}

        >>> sanitize_for_logging("plain string")
        'plain string'
    """
    if data is None:
        return None

    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value)
        else:
            sanitized[key] = value

    return sanitized


def setup_logging(level: str = "INFO", console: Optional[Console] = None) -> None:
    """
    Configure the root logger for CLI use.

    Replaces any handler previously installed by this function so repeated
    CLI invocations in one process (tests) do not stack handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        console: Rich console to log to (defaults to stderr)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_github_forks_handler", False):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    handler._github_forks_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level.upper())
