"""Output helpers for github-forks CLI commands.

Provides the JSON envelope used by every command's ``--json`` mode.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def format_json_success(data: Any, metadata: Optional[Dict[str, Any]] = None) -> str:
    """Format a command result as the standard JSON envelope.

    Values json cannot encode (fork ``created_at`` datetimes, paths) are
    written with ``str``.

    Returns:
        JSON string with format: {"success": true, "data": ..., "metadata": {...}}
    """
    envelope_metadata: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    envelope_metadata.update(metadata or {})

    return json.dumps(
        {"success": True, "data": data, "metadata": envelope_metadata},
        indent=2,
        default=str,
    )


def format_json_error(
    error_message: str,
    error_type: Optional[str] = None,
    status_code: Optional[int] = None,
) -> str:
    """Format a failed command as JSON.

    ``status_code`` is the GitHub HTTP status when the failure came from the
    API; it is omitted for local errors.

    Returns:
        JSON string with format:
        {"success": false, "error": ..., "error_type": ..., "status_code": ...}
    """
    result: Dict[str, Any] = {
        "success": False,
        "error": error_message,
        "error_type": error_type or "Error",
    }
    if status_code is not None:
        result["status_code"] = status_code
    return json.dumps(result, indent=2)
