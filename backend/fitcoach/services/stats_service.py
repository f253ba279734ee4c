"""Aggregated history for charts: per-period exercise, session and condition stats."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from sqlalchemy.orm import Session

from fitcoach.errors import NotFoundError, ValidationError
from fitcoach.models import (
    DailyCondition,
    Exercise,
    ExerciseResult,
    PlanStatus,
    SessionStatus,
    TrainingPlan,
    WorkoutExercise,
    WorkoutSession,
)
from fitcoach.schemas import ConditionStatsPoint, ExercisePerformancePoint, SessionStatsPoint
from fitcoach.services.analysis_service import CONDITION_METRICS

logger = logging.getLogger(__name__)

GROUPINGS = ("day", "week", "month", "year")

T = TypeVar("T")


def period_start(day: date, group_by: str) -> date:
    """First day of the period ``day`` falls in. Weeks start on Monday."""
    if group_by == "day":
        return day
    if group_by == "week":
        return day - timedelta(days=day.weekday())
    if group_by == "month":
        return day.replace(day=1)
    if group_by == "year":
        return day.replace(month=1, day=1)
    raise ValueError(f"Unknown grouping: {group_by}")


def check_grouping(group_by: str) -> None:
    if group_by not in GROUPINGS:
        raise ValidationError([f"group_by: must be one of {', '.join(GROUPINGS)}"])


def bucket(items: Iterable[T], day_of: Callable[[T], date], group_by: str) -> Dict[date, List[T]]:
    """Group items by period start, oldest period first."""
    buckets: Dict[date, List[T]] = {}
    for item in items:
        buckets.setdefault(period_start(day_of(item), group_by), []).append(item)
    return dict(sorted(buckets.items()))


def mean(values: List[float]) -> Optional[float]:
    """Average of the values that are present; None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(sum(present) / len(present), 2)


class StatsService:
    """Read-only aggregations over a user's logged history."""

    def __init__(self, db: Session):
        self.db = db

    def exercise_performance(
        self,
        user_id: int,
        exercise_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        group_by: str = "day",
    ) -> List[ExercisePerformancePoint]:
        """Sets, best weight and average reps/duration for one catalog exercise per period."""
        check_grouping(group_by)
        if self.db.get(Exercise, exercise_id) is None:
            raise NotFoundError(f"Exercise with ID {exercise_id} not found.")

        query = (
            self.db.query(ExerciseResult)
            .join(WorkoutExercise, ExerciseResult.workout_exercise_id == WorkoutExercise.id)
            .filter(ExerciseResult.user_id == user_id, WorkoutExercise.exercise_id == exercise_id)
        )
        if start is not None:
            query = query.filter(ExerciseResult.completed_at >= datetime.combine(start, time.min))
        if end is not None:
            query = query.filter(ExerciseResult.completed_at < datetime.combine(end + timedelta(days=1), time.min))
        results = query.order_by(ExerciseResult.completed_at).all()

        points = []
        for period, rows in bucket(results, lambda r: r.completed_at.date(), group_by).items():
            weights = [r.weight_used for r in rows if r.weight_used is not None]
            points.append(
                ExercisePerformancePoint(
                    period_start=period,
                    total_sets=len(rows),
                    max_weight=max(weights) if weights else None,
                    average_reps=mean([r.reps_completed for r in rows]),
                    average_duration=mean([r.duration_completed for r in rows]),
                )
            )
        logger.debug(f"Exercise {exercise_id} stats for user {user_id}: {len(points)} periods.")
        return points

    def session_stats(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        group_by: str = "week",
        status: Optional[SessionStatus] = None,
    ) -> List[SessionStatsPoint]:
        """Session counts per period, split by status, across all of the user's plans."""
        check_grouping(group_by)
        query = (
            self.db.query(WorkoutSession)
            .join(TrainingPlan, WorkoutSession.training_plan_id == TrainingPlan.id)
            .filter(TrainingPlan.user_id == user_id)
        )
        if start is not None:
            query = query.filter(WorkoutSession.date >= start)
        if end is not None:
            query = query.filter(WorkoutSession.date <= end)
        if status is not None:
            query = query.filter(WorkoutSession.status == SessionStatus(status))
        sessions = query.order_by(WorkoutSession.date).all()

        points = []
        for period, rows in bucket(sessions, lambda s: s.date, group_by).items():
            points.append(
                SessionStatsPoint(
                    period_start=period,
                    total_sessions=len(rows),
                    completed_count=sum(1 for s in rows if s.status == SessionStatus.COMPLETED),
                    skipped_count=sum(1 for s in rows if s.status == SessionStatus.SKIPPED),
                    planned_count=sum(1 for s in rows if s.status == SessionStatus.PLANNED),
                )
            )
        return points

    def condition_stats(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        group_by: str = "day",
    ) -> List[ConditionStatsPoint]:
        """Per-period averages of each wellness metric; missing values are left out of the mean."""
        check_grouping(group_by)
        query = self.db.query(DailyCondition).filter(DailyCondition.user_id == user_id)
        if start is not None:
            query = query.filter(DailyCondition.date >= start)
        if end is not None:
            query = query.filter(DailyCondition.date <= end)
        conditions = query.order_by(DailyCondition.date).all()

        points = []
        for period, rows in bucket(conditions, lambda c: c.date, group_by).items():
            averages = {field: mean([getattr(c, field) for c in rows]) for field, _ in CONDITION_METRICS}
            points.append(ConditionStatsPoint(period_start=period, total_entries=len(rows), **averages))
        return points

    def plan_completion(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, int]:
        """Number of plans in each status, for plans ending inside the window."""
        query = self.db.query(TrainingPlan.status).filter(TrainingPlan.user_id == user_id)
        if start is not None:
            query = query.filter(TrainingPlan.end_date >= start)
        if end is not None:
            query = query.filter(TrainingPlan.end_date <= end)

        counts = {status.value: 0 for status in PlanStatus}
        for row in query:
            counts[PlanStatus(row.status).value] += 1
        return counts
