"""
Practice-management domain: clients, sessions, package accounting,
measurements, assessments, progress photos and the dashboard.
"""

from .accounting import ClientOverview, SessionStats, remaining_sessions
from .dashboard import Dashboard, build_dashboard, day_window, week_window
from .models import (
    Assessment,
    Client,
    ClientSummary,
    Measurement,
    Photo,
    PhotoGroup,
    ScoreLevel,
    SessionStatus,
    Trainer,
    TrainingSession,
    resolve_duration,
)

__all__ = [
    "Assessment",
    "Client",
    "ClientOverview",
    "ClientSummary",
    "Dashboard",
    "Measurement",
    "Photo",
    "PhotoGroup",
    "ScoreLevel",
    "SessionStats",
    "SessionStatus",
    "Trainer",
    "TrainingSession",
    "build_dashboard",
    "day_window",
    "remaining_sessions",
    "resolve_duration",
    "week_window",
]
