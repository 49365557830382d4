"""CLI utilities package for github-forks.

Provides reusable patterns for CLI command implementation including:
- JSON output formatting
- User-facing error messages
"""

from .error_messages import handle_api_error
from .output_helpers import format_json_error, format_json_success

__all__ = [
    "format_json_success",
    "format_json_error",
    "handle_api_error",
]
