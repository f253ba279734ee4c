"""Read operations on training plans."""

from typing import List

from sqlalchemy.orm import Session, selectinload

from fitcoach.models import TrainingPlan, WorkoutExercise, WorkoutSession
from fitcoach.schemas import PerformanceSummary
from fitcoach.services.analysis_service import PerformanceAnalyzer
from fitcoach.services.ownership import check_plan_ownership


def plan_tree_options():
    """Eager-load sessions -> planned exercises -> catalog exercise and results."""
    exercises = selectinload(TrainingPlan.sessions).selectinload(WorkoutSession.workout_exercises)
    return (
        exercises.joinedload(WorkoutExercise.exercise),
        exercises.selectinload(WorkoutExercise.results),
    )


class PlanService:
    def __init__(self, db: Session):
        self.db = db

    def get_plan(self, plan_id: int, user_id: int) -> TrainingPlan:
        """A plan with its sessions, exercises and results, owned by ``user_id``."""
        check_plan_ownership(self.db, plan_id, user_id).unwrap()
        return (
            self.db.query(TrainingPlan)
            .options(*plan_tree_options())
            .filter(TrainingPlan.id == plan_id)
            .one()
        )

    def list_plans(self, user_id: int) -> List[TrainingPlan]:
        return (
            self.db.query(TrainingPlan)
            .filter(TrainingPlan.user_id == user_id)
            .order_by(TrainingPlan.start_date.desc(), TrainingPlan.id.desc())
            .all()
        )

    def analyze_plan(self, plan_id: int, user_id: int) -> PerformanceSummary:
        plan = check_plan_ownership(self.db, plan_id, user_id).unwrap()
        return PerformanceAnalyzer(self.db).analyze_plan(plan)
