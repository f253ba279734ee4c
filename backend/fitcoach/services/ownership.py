"""Ownership lookups for plans, sessions and planned exercises.

Each lookup walks the chain up to the owning plan in a single joined query
and reports one of three outcomes: found and owned, found but owned by
someone else, or not found (including a broken chain).
"""

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from sqlalchemy.orm import Session

from fitcoach.errors import ForbiddenError, NotFoundError
from fitcoach.models import TrainingPlan, WorkoutExercise, WorkoutSession

T = TypeVar("T")


class Ownership(enum.Enum):
    OWNED = "owned"
    NOT_OWNED = "not_owned"
    NOT_FOUND = "not_found"


@dataclass
class OwnershipResult(Generic[T]):
    outcome: Ownership
    label: str
    entity_id: int
    entity: Optional[T] = None
    owner_id: Optional[int] = None

    @property
    def owned(self) -> bool:
        return self.outcome is Ownership.OWNED

    def unwrap(self) -> T:
        """Return the entity, or raise the error matching the outcome."""
        if self.outcome is Ownership.OWNED:
            return self.entity
        if self.outcome is Ownership.NOT_OWNED:
            raise ForbiddenError()
        raise NotFoundError(f"{self.label} with ID {self.entity_id} not found.")


def _resolve(label, entity_id, row, user_id) -> OwnershipResult:
    if row is None:
        return OwnershipResult(Ownership.NOT_FOUND, label, entity_id)
    entity, owner_id = row
    outcome = Ownership.OWNED if owner_id == user_id else Ownership.NOT_OWNED
    return OwnershipResult(outcome, label, entity_id, entity, owner_id)


def check_plan_ownership(db: Session, plan_id: int, user_id: int, lock: bool = False) -> OwnershipResult[TrainingPlan]:
    query = db.query(TrainingPlan, TrainingPlan.user_id).filter(TrainingPlan.id == plan_id)
    if lock:
        query = query.with_for_update()
    return _resolve("Training plan", plan_id, query.first(), user_id)


def check_session_ownership(db: Session, session_id: int, user_id: int, lock: bool = False) -> OwnershipResult[WorkoutSession]:
    query = (
        db.query(WorkoutSession, TrainingPlan.user_id)
        .join(TrainingPlan, WorkoutSession.training_plan_id == TrainingPlan.id)
        .filter(WorkoutSession.id == session_id)
    )
    if lock:
        query = query.with_for_update(of=WorkoutSession)
    return _resolve("Workout session", session_id, query.first(), user_id)


def check_workout_exercise_ownership(
    db: Session, workout_exercise_id: int, user_id: int, lock: bool = False
) -> OwnershipResult[WorkoutExercise]:
    query = (
        db.query(WorkoutExercise, TrainingPlan.user_id)
        .join(WorkoutSession, WorkoutExercise.workout_session_id == WorkoutSession.id)
        .join(TrainingPlan, WorkoutSession.training_plan_id == TrainingPlan.id)
        .filter(WorkoutExercise.id == workout_exercise_id)
    )
    if lock:
        query = query.with_for_update(of=WorkoutExercise)
    return _resolve("Workout exercise", workout_exercise_id, query.first(), user_id)
