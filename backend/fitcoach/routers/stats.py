"""Stats API router: aggregated history for charts."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, List, Literal, Optional
from datetime import date

from fitcoach.database import get_db
from fitcoach.models import SessionStatus
from fitcoach.routers.deps import get_current_user_id
from fitcoach.schemas import ConditionStatsPoint, ExercisePerformancePoint, SessionStatsPoint
from fitcoach.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])

Grouping = Literal["day", "week", "month", "year"]


@router.get("/performance/exercise/{exercise_id}", response_model=List[ExercisePerformancePoint])
def exercise_performance(
    exercise_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: Grouping = "day",
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Logged sets, best weight and averages for one exercise, per period."""
    return StatsService(db).exercise_performance(
        user_id, exercise_id, start=start_date, end=end_date, group_by=group_by
    )


@router.get("/sessions", response_model=List[SessionStatsPoint])
def session_stats(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: Grouping = "week",
    status: Optional[SessionStatus] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return StatsService(db).session_stats(
        user_id, start=start_date, end=end_date, group_by=group_by, status=status
    )


@router.get("/daily-conditions", response_model=List[ConditionStatsPoint])
def condition_stats(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: Grouping = "day",
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return StatsService(db).condition_stats(user_id, start=start_date, end=end_date, group_by=group_by)


@router.get("/completion/plans", response_model=Dict[str, int])
def plan_completion(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Plan counts by status, for plans ending in the window."""
    return StatsService(db).plan_completion(user_id, start=start_date, end=end_date)
