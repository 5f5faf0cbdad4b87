"""
Utility functions for the contests application.

- freshness.py: staleness and retention windows for the refresh cycle
- normalization.py: timestamp parsing, status derivation, platform mapping
"""

from .freshness import (
    is_stale,
    retention_cutoff,
    within_retention,
    staleness_window,
    retention_window,
)

__all__ = [
    "is_stale",
    "retention_cutoff",
    "within_retention",
    "staleness_window",
    "retention_window",
]
