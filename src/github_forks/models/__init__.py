"""Data models for github-forks."""

from .fork import Fork, ForkSort

__all__ = ["Fork", "ForkSort"]
