"""Routers package."""

from fitcoach.routers.conditions import router as conditions_router
from fitcoach.routers.plans import router as plans_router
from fitcoach.routers.results import router as results_router
from fitcoach.routers.sessions import router as sessions_router
from fitcoach.routers.stats import router as stats_router
from fitcoach.routers.workout_exercises import router as workout_exercises_router

__all__ = [
    "conditions_router",
    "plans_router",
    "results_router",
    "sessions_router",
    "stats_router",
    "workout_exercises_router",
]
