"""Database models package."""

from fitcoach.models.user import User, UserProfile
from fitcoach.models.exercise import Exercise
from fitcoach.models.training_plan import TrainingPlan, WorkoutSession, WorkoutExercise
from fitcoach.models.exercise_result import ExerciseResult
from fitcoach.models.daily_condition import DailyCondition
from fitcoach.models.status import PlanStatus, SessionStatus, ExerciseStatus

__all__ = [
    "User",
    "UserProfile",
    "Exercise",
    "TrainingPlan",
    "WorkoutSession",
    "WorkoutExercise",
    "ExerciseResult",
    "DailyCondition",
    "PlanStatus",
    "SessionStatus",
    "ExerciseStatus",
]
