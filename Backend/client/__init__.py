"""
Async client for the Momentum API: session persistence, optimistic
mutations, reminders and a locally computed heatmap.
"""

from client.session import UserSession, SessionStore
from client.api_client import MomentumAPIClient
from client.mutations import MutationResult, HabitMutationHandler, TaskMutationHandler
from client.reminders import Reminder, ReminderLoop
from client.dashboard import HeatmapDashboard

__all__ = [
    "UserSession",
    "SessionStore",
    "MomentumAPIClient",
    "MutationResult",
    "HabitMutationHandler",
    "TaskMutationHandler",
    "Reminder",
    "ReminderLoop",
    "HeatmapDashboard",
]
