"""Planned workout exercises API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from fitcoach.database import get_db
from fitcoach.routers.deps import get_current_user_id
from fitcoach.schemas import (
    ExerciseResultCreate,
    ExerciseResultResponse,
    ExerciseStatusUpdate,
    SwapExerciseRequest,
    WorkoutExerciseResponse,
    WorkoutExerciseUpdate,
)
from fitcoach.services.cascade_service import StatusCascadeEngine
from fitcoach.services.workout_exercise_service import WorkoutExerciseService

router = APIRouter(prefix="/workout-exercises", tags=["workout-exercises"])


@router.put("/{workout_exercise_id}")
def update_workout_exercise(
    workout_exercise_id: int,
    payload: WorkoutExerciseUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Edit the targets, order or notes of a planned exercise."""
    workout_exercise = WorkoutExerciseService(db).update(workout_exercise_id, user_id, payload)
    return {
        "message": "Workout exercise updated.",
        "workout_exercise": WorkoutExerciseResponse.model_validate(workout_exercise),
    }


@router.put("/{workout_exercise_id}/swap")
def swap_workout_exercise(
    workout_exercise_id: int,
    payload: SwapExerciseRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    workout_exercise = WorkoutExerciseService(db).swap(workout_exercise_id, user_id, payload)
    return {
        "message": "Exercise swapped.",
        "workout_exercise": WorkoutExerciseResponse.model_validate(workout_exercise),
    }


@router.put("/{workout_exercise_id}/status")
def update_workout_exercise_status(
    workout_exercise_id: int,
    payload: ExerciseStatusUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Manually complete or skip a planned exercise."""
    workout_exercise = StatusCascadeEngine(db).set_exercise_status(workout_exercise_id, user_id, payload.status)
    return {
        "message": f"Workout exercise status updated to {workout_exercise.status.value}.",
        "workout_exercise": WorkoutExerciseResponse.model_validate(workout_exercise),
    }


@router.delete("/{workout_exercise_id}")
def delete_workout_exercise(
    workout_exercise_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    WorkoutExerciseService(db).delete(workout_exercise_id, user_id)
    return {"message": "Workout exercise deleted."}


@router.post("/{workout_exercise_id}/results", status_code=201)
def log_result(
    workout_exercise_id: int,
    payload: ExerciseResultCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Log one set and cascade completion up to the session and plan."""
    result = StatusCascadeEngine(db).record_result(workout_exercise_id, user_id, payload)
    return {
        "message": "Result logged successfully.",
        "result": ExerciseResultResponse.model_validate(result),
    }


@router.get("/{workout_exercise_id}/results", response_model=List[ExerciseResultResponse])
def list_results(
    workout_exercise_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return WorkoutExerciseService(db).get_results(workout_exercise_id, user_id)
