"""
Package accounting.

A client's package is consumed by session status, not by a stored counter:
completed and no-show sessions are used, scheduled and cancelled ones are
not. Counts are derived on every read, so there is nothing to keep in sync
when a session changes status.
"""

from dataclasses import dataclass
from typing import Iterable

from .models import Client, SessionStatus


@dataclass(frozen=True)
class SessionStats:
    """Live session counts for one client, by status."""
    scheduled: int = 0
    completed: int = 0
    no_show: int = 0
    cancelled: int = 0

    @classmethod
    def from_counts(cls, counts: Iterable[tuple[SessionStatus, int]]) -> "SessionStats":
        """Build stats from (status, count) rows of a GROUP BY status query."""
        totals = {status: 0 for status in SessionStatus}
        for status, count in counts:
            totals[status] += count
        return cls(
            scheduled=totals[SessionStatus.SCHEDULED],
            completed=totals[SessionStatus.COMPLETED],
            no_show=totals[SessionStatus.NO_SHOW],
            cancelled=totals[SessionStatus.CANCELLED],
        )

    @property
    def used(self) -> int:
        return self.completed + self.no_show

    @property
    def total(self) -> int:
        return self.scheduled + self.completed + self.no_show + self.cancelled


def remaining_sessions(total_package_size: int, stats: SessionStats) -> int:
    """
    Sessions left in the package.

    May go negative when a client has used more than they bought; that is
    reported as-is.
    """
    return total_package_size - stats.used


@dataclass(frozen=True)
class ClientOverview:
    """A client together with its derived package counts."""
    client: Client
    stats: SessionStats

    @property
    def remaining_sessions(self) -> int:
        return remaining_sessions(self.client.total_package_size, self.stats)
