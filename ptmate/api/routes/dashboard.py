"""
Dashboard and calendar endpoints. Read-only.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ...core.training.dashboard import build_dashboard
from ..dependencies import CurrentTrainer, SessionRepositoryDep, TimezoneDep
from .sessions import SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class WeeklyStatsResponse(BaseModel):
    """Sessions in the current Sunday-to-Saturday week, by status."""
    scheduled: int
    completed: int
    no_show: int
    cancelled: int


class DashboardResponse(BaseModel):
    today_sessions: list[SessionResponse]
    total_clients: int
    total_sessions: int
    weekly_stats: WeeklyStatsResponse
    upcoming_sessions: list[SessionResponse]


class CalendarResponse(BaseModel):
    sessions: list[SessionResponse]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/dashboard", response_model=DashboardResponse, summary="Overview for the home screen")
def get_dashboard(
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
    tz: TimezoneDep,
) -> DashboardResponse:
    """
    Today's sessions, totals, this week's status counts and the next five
    scheduled sessions. "Today" and "this week" follow the practice's
    configured time zone.
    """
    dashboard = build_dashboard(sessions, trainer, tz)
    stats = dashboard.weekly_stats

    return DashboardResponse(
        today_sessions=[SessionResponse.from_domain(s) for s in dashboard.today_sessions],
        total_clients=dashboard.total_clients,
        total_sessions=dashboard.total_sessions,
        weekly_stats=WeeklyStatsResponse(
            scheduled=stats.scheduled,
            completed=stats.completed,
            no_show=stats.no_show,
            cancelled=stats.cancelled,
        ),
        upcoming_sessions=[SessionResponse.from_domain(s) for s in dashboard.upcoming_sessions],
    )


@router.get("/calendar", response_model=CalendarResponse, summary="Sessions in a date range")
def get_calendar(
    trainer: CurrentTrainer,
    sessions: SessionRepositoryDep,
    start: Annotated[Optional[datetime], Query(alias="from")] = None,
    end: Annotated[Optional[datetime], Query(alias="to")] = None,
) -> CalendarResponse:
    """Both ends of the range are inclusive."""
    found = sessions.list(trainer, start=start, end=end)
    return CalendarResponse(sessions=[SessionResponse.from_domain(s) for s in found])
