"""Workout sessions API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fitcoach.database import get_db
from fitcoach.routers.deps import get_current_user_id
from fitcoach.schemas import (
    SessionStatusUpdate,
    WorkoutExerciseCreate,
    WorkoutExerciseResponse,
    WorkoutSessionResponse,
    WorkoutSessionSummary,
)
from fitcoach.services.cascade_service import StatusCascadeEngine
from fitcoach.services.session_service import SessionService

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/{session_id}", response_model=WorkoutSessionResponse)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return SessionService(db).get_session(session_id, user_id)


@router.put("/{session_id}/status")
def update_session_status(
    session_id: int,
    payload: SessionStatusUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Manually complete or skip a session."""
    session = StatusCascadeEngine(db).set_session_status(session_id, user_id, payload.status)
    return {
        "message": f"Session status updated to {session.status.value}.",
        "session": WorkoutSessionSummary.model_validate(session),
    }


@router.post("/{session_id}/exercises", status_code=201)
def add_exercise(
    session_id: int,
    payload: WorkoutExerciseCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    workout_exercise = SessionService(db).add_exercise(session_id, user_id, payload)
    return {
        "message": "Exercise added to session.",
        "workout_exercise": WorkoutExerciseResponse.model_validate(workout_exercise),
    }
