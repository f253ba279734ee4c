"""Logged results API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from fitcoach.database import get_db
from fitcoach.routers.deps import get_current_user_id
from fitcoach.schemas import ExerciseResultResponse
from fitcoach.services.workout_exercise_service import WorkoutExerciseService

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/", response_model=List[ExerciseResultResponse])
def list_user_results(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """The user's logged sets, newest first."""
    return WorkoutExerciseService(db).get_user_results(
        user_id, start=start_date, end=end_date, limit=limit, offset=offset
    )
