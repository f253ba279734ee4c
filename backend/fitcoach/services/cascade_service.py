"""Status cascade: logged sets -> planned exercise -> session -> plan.

A parent's completion status is recomputed whenever one of its children
reaches a terminal state. Recomputation is strictly bottom-up and only runs
in response to an explicit event (a logged result, a manual status change,
or the overdue sweeper).
"""

import logging
from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.database import transaction
from fitcoach.errors import ConflictError, ValidationError
from fitcoach.models import (
    ExerciseResult,
    ExerciseStatus,
    PlanStatus,
    SessionStatus,
    TrainingPlan,
    WorkoutExercise,
    WorkoutSession,
)
from fitcoach.models.status import (
    EXERCISE_TERMINAL,
    SESSION_TERMINAL,
    transition,
)
from fitcoach.schemas import ExerciseResultCreate
from fitcoach.services.ownership import (
    check_plan_ownership,
    check_session_ownership,
    check_workout_exercise_ownership,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ACTIVE_PLAN_EXISTS = (
    "You already have an active training plan. "
    "Please complete or archive it before activating another one."
)


def coerce_input(schema: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Validate raw input against ``schema``; field errors become ValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        messages = [
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationError(messages) from exc


class StatusCascadeEngine:
    """Keeps session and plan statuses a function of their children."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def record_result(self, workout_exercise_id: int, user_id: int, result_data) -> ExerciseResult:
        """Log one set and cascade any completion it causes."""
        data = coerce_input(ExerciseResultCreate, result_data)

        with transaction(self.db):
            ownership = check_workout_exercise_ownership(
                self.db, workout_exercise_id, user_id, lock=True
            )
            workout_exercise = ownership.unwrap()

            result = ExerciseResult(
                workout_exercise_id=workout_exercise.id,
                user_id=ownership.owner_id,
                **data.model_dump(),
            )
            self.db.add(result)
            self.db.flush()

            if workout_exercise.status == ExerciseStatus.PLANNED:
                transition(workout_exercise, ExerciseStatus.STARTED)
                logger.info(f"WorkoutExercise {workout_exercise.id} status updated to Started.")

            logged_sets = (
                self.db.query(func.count(ExerciseResult.id))
                .filter(ExerciseResult.workout_exercise_id == workout_exercise.id)
                .scalar()
            )

            # Exercises without a set target never complete from logging alone.
            planned_sets = workout_exercise.sets_planned
            completed_now = False
            if (
                planned_sets is not None
                and planned_sets > 0
                and logged_sets >= planned_sets
                and workout_exercise.status not in EXERCISE_TERMINAL
            ):
                transition(workout_exercise, ExerciseStatus.COMPLETED)
                completed_now = True
                logger.info(
                    f"WorkoutExercise {workout_exercise.id} completed ({logged_sets}/{planned_sets} sets logged)."
                )

            if completed_now:
                self.db.flush()
                self.recompute_session(workout_exercise.workout_session_id)

        self.db.refresh(result)
        return result

    def set_exercise_status(self, workout_exercise_id: int, user_id: int, new_status) -> WorkoutExercise:
        """Manually complete or skip a planned exercise, then recompute its session."""
        new_status = ExerciseStatus(new_status)
        if new_status not in EXERCISE_TERMINAL:
            raise ValidationError(["status: must be Completed or Skipped"])

        with transaction(self.db):
            workout_exercise = check_workout_exercise_ownership(
                self.db, workout_exercise_id, user_id, lock=True
            ).unwrap()
            if workout_exercise.status in EXERCISE_TERMINAL:
                raise ConflictError(
                    f"Workout exercise {workout_exercise_id} is already {workout_exercise.status.value}."
                )
            transition(workout_exercise, new_status)
            self.db.flush()
            self.recompute_session(workout_exercise.workout_session_id)

        self.db.refresh(workout_exercise)
        return workout_exercise

    def set_session_status(self, session_id: int, user_id: int, new_status) -> WorkoutSession:
        """Manually complete or skip a session, then recompute its plan."""
        new_status = SessionStatus(new_status)
        if new_status not in SESSION_TERMINAL:
            raise ValidationError(["status: must be Completed or Skipped"])

        with transaction(self.db):
            session = check_session_ownership(self.db, session_id, user_id, lock=True).unwrap()
            if session.status in SESSION_TERMINAL:
                raise ConflictError(f"Workout session {session_id} is already {session.status.value}.")
            transition(session, new_status, "workout session")
            self.db.flush()
            logger.info(f"Session {session_id} manually set to {new_status.value}.")
            self.recompute_plan(session.training_plan_id)

        self.db.refresh(session)
        return session

    def set_plan_status(self, plan_id: int, user_id: int, new_status) -> TrainingPlan:
        """Manually move a plan along the plan transition table."""
        new_status = PlanStatus(new_status)

        with transaction(self.db, conflict_message=ACTIVE_PLAN_EXISTS):
            plan = check_plan_ownership(self.db, plan_id, user_id, lock=True).unwrap()
            if new_status == PlanStatus.ACTIVE and plan.status != PlanStatus.ACTIVE:
                other_active = (
                    self.db.query(TrainingPlan.id)
                    .filter(
                        TrainingPlan.user_id == plan.user_id,
                        TrainingPlan.status == PlanStatus.ACTIVE,
                        TrainingPlan.id != plan.id,
                    )
                    .first()
                )
                if other_active:
                    raise ConflictError(ACTIVE_PLAN_EXISTS)
            if transition(plan, new_status, "training plan"):
                logger.info(f"Plan {plan_id} manually set to {new_status.value}.")

        self.db.refresh(plan)
        return plan

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def _lock_query(self, model, entity_id: int):
        """Row-locked read of one row, refreshed from the database."""
        return (
            self.db.query(model)
            .filter(model.id == entity_id)
            .with_for_update()
            .populate_existing()
        )

    def recompute_session(self, session_id: int) -> bool:
        """Complete the session if every planned exercise is done or skipped.

        Returns True when the session transitioned. Sessions without any
        planned exercise (rest days) are left for manual or overdue handling.
        The session row is locked before its children are counted, so two
        concurrent writers finishing the last exercises serialize here.
        """
        self.db.flush()
        session = self._lock_query(WorkoutSession, session_id).first()
        if session is None:
            logger.warning(f"recompute_session: session {session_id} not found.")
            return False
        if session.status in SESSION_TERMINAL:
            return False

        statuses = [
            row.status
            for row in self.db.query(WorkoutExercise.status).filter(
                WorkoutExercise.workout_session_id == session_id
            )
        ]
        if not statuses:
            return False

        done = sum(1 for status in statuses if status in EXERCISE_TERMINAL)
        logger.debug(f"Session {session_id}: {done}/{len(statuses)} exercises done.")
        if done < len(statuses):
            return False

        transition(session, SessionStatus.COMPLETED)
        self.db.flush()
        logger.info(f"Session {session_id} status updated to Completed.")
        self.recompute_plan(session.training_plan_id)
        return True

    def recompute_plan(self, plan_id: int) -> bool:
        """Complete the plan if every session is done or skipped."""
        self.db.flush()
        plan = self._lock_query(TrainingPlan, plan_id).first()
        if plan is None:
            logger.warning(f"recompute_plan: plan {plan_id} not found.")
            return False
        if plan.status != PlanStatus.ACTIVE:
            return False

        statuses = [
            row.status
            for row in self.db.query(WorkoutSession.status).filter(
                WorkoutSession.training_plan_id == plan_id
            )
        ]
        if not statuses:
            return False

        done = sum(1 for status in statuses if status in SESSION_TERMINAL)
        logger.debug(f"Plan {plan_id}: {done}/{len(statuses)} sessions done.")
        if done < len(statuses):
            return False

        transition(plan, PlanStatus.COMPLETED)
        self.db.flush()
        logger.info(f"Plan {plan_id} status updated to Completed.")
        return True
