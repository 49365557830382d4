"""github-forks: fork lifecycle checks against the GitHub REST API."""

__version__ = "0.3.0"
