"""
Error taxonomy for the contest aggregation pipeline.

- SourceUnavailable: one external source failed (network, timeout, bad status,
  malformed payload). Recovered at the source boundary, never surfaced.
- PersistenceFailure: the contest store could not be reached after retries.
  Fatal to the request that triggered it.

Partial degradation (some sources empty) and matching misses (no solution
video) are normal outcomes, not errors.
"""


class ContestTrackerError(Exception):
    """Base class for contest tracker errors."""


class SourceUnavailable(ContestTrackerError):
    """An external contest or video source could not be used."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source} unavailable: {reason}")


class PersistenceFailure(ContestTrackerError):
    """The contest repository failed after exhausting its retries."""
