"""
Dashboard aggregation.

"Today" and "this week" are calendar notions, so they depend on where the
trainer is. The windows are computed in the practice's time zone and then
converted to UTC for querying. Weeks start on Sunday.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional, Protocol

from ..scope import TrainerScope
from .accounting import SessionStats
from .models import SessionStatus, TrainingSession, as_utc, utcnow

UPCOMING_LIMIT = 5


@dataclass(frozen=True)
class TimeWindow:
    """Half-open UTC interval [start, end)."""
    start: datetime
    end: datetime


def day_window(now: datetime, tz: tzinfo) -> TimeWindow:
    local = now.astimezone(tz)
    start = datetime.combine(local.date(), time.min, tzinfo=tz)
    end = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return TimeWindow(start=as_utc(start), end=as_utc(end))


def week_window(now: datetime, tz: tzinfo) -> TimeWindow:
    local = now.astimezone(tz)
    # date.weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (local.weekday() + 1) % 7
    first_day = local.date() - timedelta(days=days_since_sunday)
    start = datetime.combine(first_day, time.min, tzinfo=tz)
    end = datetime.combine(first_day + timedelta(days=7), time.min, tzinfo=tz)
    return TimeWindow(start=as_utc(start), end=as_utc(end))


class DashboardSource(Protocol):
    """Read-only queries the dashboard is assembled from."""

    def sessions_between(
        self,
        scope: TrainerScope,
        start: datetime,
        end: datetime,
    ) -> list[TrainingSession]:
        """Sessions in [start, end), earliest first."""
        ...

    def status_counts_between(
        self,
        scope: TrainerScope,
        start: datetime,
        end: datetime,
    ) -> list[tuple[SessionStatus, int]]:
        ...

    def count_clients(self, scope: TrainerScope) -> int:
        ...

    def count_sessions(self, scope: TrainerScope) -> int:
        ...

    def upcoming(self, scope: TrainerScope, after: datetime, limit: int) -> list[TrainingSession]:
        """Scheduled sessions strictly after `after`, soonest first."""
        ...


@dataclass
class Dashboard:
    today_sessions: list[TrainingSession]
    total_clients: int
    total_sessions: int
    weekly_stats: SessionStats
    upcoming_sessions: list[TrainingSession]


def build_dashboard(
    source: DashboardSource,
    scope: TrainerScope,
    tz: tzinfo,
    now: Optional[datetime] = None,
) -> Dashboard:
    now = as_utc(now) if now is not None else utcnow()
    today = day_window(now, tz)
    week = week_window(now, tz)

    return Dashboard(
        today_sessions=source.sessions_between(scope, today.start, today.end),
        total_clients=source.count_clients(scope),
        total_sessions=source.count_sessions(scope),
        weekly_stats=SessionStats.from_counts(
            source.status_counts_between(scope, week.start, week.end)
        ),
        upcoming_sessions=source.upcoming(scope, now, UPCOMING_LIMIT),
    )
