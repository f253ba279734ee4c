"""Workout session reads and manual exercise additions."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from fitcoach.database import transaction
from fitcoach.errors import ConflictError, NotFoundError
from fitcoach.models import Exercise, ExerciseStatus, WorkoutExercise, WorkoutSession
from fitcoach.models.status import SESSION_TERMINAL
from fitcoach.schemas import WorkoutExerciseCreate
from fitcoach.services.cascade_service import coerce_input
from fitcoach.services.ownership import check_session_ownership

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, session_id: int, user_id: int) -> WorkoutSession:
        check_session_ownership(self.db, session_id, user_id).unwrap()
        return (
            self.db.query(WorkoutSession)
            .options(
                selectinload(WorkoutSession.workout_exercises).joinedload(WorkoutExercise.exercise),
                selectinload(WorkoutSession.workout_exercises).selectinload(WorkoutExercise.results),
            )
            .filter(WorkoutSession.id == session_id)
            .one()
        )

    def add_exercise(self, session_id: int, user_id: int, data) -> WorkoutExercise:
        """Append a catalog exercise to a session that is still open."""
        data = coerce_input(WorkoutExerciseCreate, data)

        with transaction(self.db):
            session = check_session_ownership(self.db, session_id, user_id, lock=True).unwrap()
            if session.status in SESSION_TERMINAL:
                raise ConflictError(
                    f"Cannot add exercises to workout session {session_id}: it is already {session.status.value}."
                )
            if self.db.get(Exercise, data.exercise_id) is None:
                raise NotFoundError(f"Exercise with ID {data.exercise_id} not found.")

            order = data.order
            if order is None:
                current_max = (
                    self.db.query(func.max(WorkoutExercise.order))
                    .filter(WorkoutExercise.workout_session_id == session.id)
                    .scalar()
                )
                order = 0 if current_max is None else current_max + 1

            workout_exercise = WorkoutExercise(
                workout_session_id=session.id,
                status=ExerciseStatus.PLANNED,
                **data.model_dump(exclude={"order"}),
                order=order,
            )
            self.db.add(workout_exercise)
            session.training_plan.is_customized = True
            self.db.flush()
            logger.info(f"Exercise {data.exercise_id} added to session {session_id} at position {order}.")

        self.db.refresh(workout_exercise)
        return workout_exercise
