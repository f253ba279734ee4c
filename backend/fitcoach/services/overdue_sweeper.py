"""Periodic reconciliation of Active plans whose week has already ended."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from fitcoach.database import SessionLocal, transaction
from fitcoach.models import ExerciseStatus, PlanStatus, SessionStatus, TrainingPlan
from fitcoach.models.status import EXERCISE_TERMINAL, SESSION_TERMINAL, transition
from fitcoach.services.cascade_service import StatusCascadeEngine

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome counts for one sweep."""

    plans_found: int = 0
    plans_completed: int = 0
    plans_archived: int = 0
    sessions_skipped: int = 0
    exercises_skipped: int = 0
    failed_plan_ids: List[int] = field(default_factory=list)


class OverdueSweeper:
    """Forces stale sessions to Skipped and closes overdue plans.

    Each plan is handled in its own database session and transaction so
    one failure never affects the others.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def find_overdue_plan_ids(self, today: date) -> List[int]:
        db = self.session_factory()
        try:
            rows = (
                db.query(TrainingPlan.id)
                .filter(TrainingPlan.status == PlanStatus.ACTIVE, TrainingPlan.end_date < today)
                .order_by(TrainingPlan.id)
                .all()
            )
            return [row.id for row in rows]
        finally:
            db.close()

    def run(self, today: Optional[date] = None) -> SweepReport:
        today = today or date.today()
        report = SweepReport()
        logger.info(f"Starting overdue plan sweep for {today}...")

        plan_ids = self.find_overdue_plan_ids(today)
        report.plans_found = len(plan_ids)
        logger.info(f"Found {len(plan_ids)} overdue active plans.")

        for plan_id in plan_ids:
            db = self.session_factory()
            try:
                self.reconcile_plan(db, plan_id, today, report)
            except Exception:
                logger.exception(f"Error processing overdue plan {plan_id}")
                report.failed_plan_ids.append(plan_id)
            finally:
                db.close()

        logger.info(
            f"Overdue plan sweep finished: {report.plans_completed} completed, "
            f"{report.plans_archived} archived, {len(report.failed_plan_ids)} failed."
        )
        return report

    def reconcile_plan(self, db: Session, plan_id: int, today: date, report: SweepReport) -> None:
        """Close one overdue plan atomically; counts are only added once it commits."""
        skipped_sessions = 0
        skipped_exercises = 0
        outcome = None

        with transaction(db):
            plan = db.query(TrainingPlan).filter(TrainingPlan.id == plan_id).with_for_update().first()
            if plan is None or plan.status != PlanStatus.ACTIVE:
                logger.info(f"Plan {plan_id} is no longer active, skipping.")
                return

            for session in plan.sessions:
                if session.date >= today or session.status in SESSION_TERMINAL:
                    continue
                for we in session.workout_exercises:
                    if we.status not in EXERCISE_TERMINAL:
                        transition(we, ExerciseStatus.SKIPPED)
                        skipped_exercises += 1
                transition(session, SessionStatus.SKIPPED)
                skipped_sessions += 1
                logger.debug(f"Session {session.id} ({session.date}) marked as Skipped.")
            db.flush()

            if StatusCascadeEngine(db).recompute_plan(plan.id):
                outcome = PlanStatus.COMPLETED
            else:
                # Empty plans and plans with sessions left open end up here.
                transition(plan, PlanStatus.ARCHIVED)
                outcome = PlanStatus.ARCHIVED
            logger.info(f"Overdue plan {plan.id} status updated to {outcome.value}.")

        report.sessions_skipped += skipped_sessions
        report.exercises_skipped += skipped_exercises
        if outcome == PlanStatus.COMPLETED:
            report.plans_completed += 1
        elif outcome == PlanStatus.ARCHIVED:
            report.plans_archived += 1
