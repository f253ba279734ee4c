"""Edits to planned exercises and result queries."""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from fitcoach.database import transaction
from fitcoach.errors import NotFoundError
from fitcoach.models import Exercise, ExerciseResult, WorkoutExercise
from fitcoach.schemas import SwapExerciseRequest, WorkoutExerciseUpdate
from fitcoach.services.cascade_service import StatusCascadeEngine, coerce_input
from fitcoach.services.ownership import check_workout_exercise_ownership

logger = logging.getLogger(__name__)

# Only these fields may change through an update; status goes through the cascade engine.
EDITABLE_FIELDS = (
    "order",
    "sets_planned",
    "reps_planned",
    "weight_planned",
    "duration_planned",
    "rest_period",
    "notes",
)


class WorkoutExerciseService:
    def __init__(self, db: Session):
        self.db = db

    def _mark_customized(self, workout_exercise: WorkoutExercise) -> None:
        workout_exercise.workout_session.training_plan.is_customized = True

    def update(self, workout_exercise_id: int, user_id: int, data) -> WorkoutExercise:
        data = coerce_input(WorkoutExerciseUpdate, data)
        changes = data.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))

        with transaction(self.db):
            workout_exercise = check_workout_exercise_ownership(
                self.db, workout_exercise_id, user_id, lock=True
            ).unwrap()
            for field, value in changes.items():
                setattr(workout_exercise, field, value)
            if changes:
                self._mark_customized(workout_exercise)

        self.db.refresh(workout_exercise)
        return workout_exercise

    def swap(self, workout_exercise_id: int, user_id: int, data) -> WorkoutExercise:
        """Point the planned exercise at another catalog entry, keeping its results."""
        data = coerce_input(SwapExerciseRequest, data)

        with transaction(self.db):
            workout_exercise = check_workout_exercise_ownership(
                self.db, workout_exercise_id, user_id, lock=True
            ).unwrap()
            if self.db.get(Exercise, data.new_exercise_id) is None:
                raise NotFoundError(f"Exercise with ID {data.new_exercise_id} not found.")
            old_exercise_id = workout_exercise.exercise_id
            workout_exercise.exercise_id = data.new_exercise_id
            self._mark_customized(workout_exercise)
            logger.info(
                f"WorkoutExercise {workout_exercise_id} swapped from exercise {old_exercise_id} "
                f"to {data.new_exercise_id}."
            )

        self.db.refresh(workout_exercise)
        return workout_exercise

    def delete(self, workout_exercise_id: int, user_id: int) -> None:
        with transaction(self.db):
            workout_exercise = check_workout_exercise_ownership(
                self.db, workout_exercise_id, user_id, lock=True
            ).unwrap()
            self._mark_customized(workout_exercise)
            session_id = workout_exercise.workout_session_id
            self.db.delete(workout_exercise)
            self.db.flush()
            # The remaining exercises may now all be done.
            StatusCascadeEngine(self.db).recompute_session(session_id)
        logger.info(f"WorkoutExercise {workout_exercise_id} deleted.")

    def get_results(self, workout_exercise_id: int, user_id: int) -> List[ExerciseResult]:
        check_workout_exercise_ownership(self.db, workout_exercise_id, user_id).unwrap()
        return (
            self.db.query(ExerciseResult)
            .filter(ExerciseResult.workout_exercise_id == workout_exercise_id)
            .order_by(ExerciseResult.set_number, ExerciseResult.completed_at)
            .all()
        )

    def get_user_results(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ExerciseResult]:
        """A user's logged sets, newest first, optionally bounded by completion date."""
        query = self.db.query(ExerciseResult).filter(ExerciseResult.user_id == user_id)
        if start is not None:
            query = query.filter(ExerciseResult.completed_at >= datetime.combine(start, time.min))
        if end is not None:
            query = query.filter(ExerciseResult.completed_at < datetime.combine(end + timedelta(days=1), time.min))
        query = query.order_by(ExerciseResult.completed_at.desc(), ExerciseResult.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()
