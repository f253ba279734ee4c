"""Performance analysis of a finished plan, used as input to the next one."""

import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from fitcoach.models import (
    DailyCondition,
    PlanStatus,
    SessionStatus,
    TrainingPlan,
    WorkoutExercise,
    WorkoutSession,
)
from fitcoach.models.status import ExerciseStatus
from fitcoach.schemas import (
    ConditionAverages,
    ExercisePerformance,
    PerformanceSummary,
)

logger = logging.getLogger(__name__)

UNKNOWN_EXERCISE = "Unknown Exercise"

CONDITION_METRICS = (
    ("sleep_hours", "Average Sleep Hours"),
    ("sleep_quality", "Average Sleep Quality (1-5)"),
    ("energy_level", "Average Energy Level (1-5)"),
    ("stress_level", "Average Stress Level (1-5)"),
    ("muscle_soreness", "Average Muscle Soreness (1-5)"),
)


def empty_summary() -> PerformanceSummary:
    """Neutral summary used when the user has no finished plan yet."""
    return PerformanceSummary()


def summarize_conditions(conditions: Iterable[DailyCondition]) -> ConditionAverages:
    """Mean of each wellness metric over the entries that exist.

    Missing values inside an entry count as zero; with no entries every
    average is None.
    """
    conditions = sorted(conditions, key=lambda c: c.date)
    averages = ConditionAverages(entries=len(conditions))
    if not conditions:
        return averages

    for field, _label in CONDITION_METRICS:
        total = sum(getattr(c, field) or 0 for c in conditions)
        setattr(averages, field, total / len(conditions))

    averages.notes = [f"- {c.date.isoformat()}: {c.notes}" for c in conditions if c.notes]
    return averages


def summarize(
    sessions: Iterable[WorkoutSession],
    conditions: Iterable[DailyCondition],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> PerformanceSummary:
    """Aggregate sessions (with exercises and results loaded) and conditions."""
    summary = PerformanceSummary(start_date=start_date, end_date=end_date)

    for session in sorted(sessions, key=lambda s: (s.date, s.id or 0)):
        summary.total_sessions += 1
        if session.status == SessionStatus.COMPLETED:
            summary.completed_sessions += 1
        elif session.status == SessionStatus.SKIPPED:
            summary.skipped_sessions += 1
        if session.notes:
            summary.session_notes.append(f"Session {session.name}: {session.notes}")

        for we in session.workout_exercises:
            _accumulate_exercise(summary, we)

    if summary.total_sessions:
        summary.completion_rate = summary.completed_sessions / summary.total_sessions

    summary.condition = summarize_conditions(conditions)
    return summary


def _accumulate_exercise(summary: PerformanceSummary, we: WorkoutExercise) -> None:
    name = we.exercise.name if we.exercise is not None else UNKNOWN_EXERCISE
    perf = summary.exercises.setdefault(name, ExercisePerformance())

    perf.planned.sets += we.sets_planned or 0
    perf.planned.reps += we.reps_planned or 0
    perf.planned.weight += we.weight_planned or 0
    perf.planned.duration += we.duration_planned or 0
    perf.planned.count += 1

    if we.status == ExerciseStatus.SKIPPED:
        perf.skipped_count += 1

    if we.results:
        perf.actual.sets += len(we.results)
        perf.actual.count += 1
        for result in we.results:
            perf.actual.reps += result.reps_completed or 0
            perf.actual.weight += result.weight_used or 0
            perf.actual.duration += result.duration_completed or 0
            if result.notes:
                perf.notes.append(f"- {name} (Set {result.set_number}): {result.notes}")

    if we.notes:
        perf.notes.append(f"- {name} (Planned Note): {we.notes}")


def _num(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def format_performance(summary: PerformanceSummary) -> str:
    """Human-readable performance block for the generation prompt."""
    if summary.exercises:
        lines = []
        for name, data in summary.exercises.items():
            planned = (
                f"Planned: {_num(data.planned.sets)} sets, {_num(data.planned.reps)} reps, "
                f"{_num(data.planned.weight)}kg, {_num(data.planned.duration)}s"
            )
            actual = (
                f"Actual: {_num(data.actual.sets)} sets logged, {_num(data.actual.reps)} reps total, "
                f"{_num(data.actual.weight)}kg total, {_num(data.actual.duration)}s total"
            )
            skipped = f", Skipped: {data.skipped_count} times" if data.skipped_count else ""
            notes = f"\n    Notes: {'; '.join(data.notes)}" if data.notes else ""
            lines.append(f"- {name}: {planned} | {actual}{skipped}{notes}")
        exercise_details = "\n".join(lines)
    else:
        exercise_details = "No exercise data logged."

    session_notes = "; ".join(summary.session_notes) if summary.session_notes else "None"
    return (
        f"Overall Session Completion Rate: {summary.completion_rate * 100:.1f}% (Completed sessions)\n"
        f"Total Sessions: {summary.total_sessions}\n"
        f"Total Sessions Skipped: {summary.skipped_sessions}\n"
        f"Exercise Details:\n{exercise_details}\n"
        f"Overall Session Notes: {session_notes}"
    )


def format_condition(condition: ConditionAverages) -> str:
    """Human-readable daily-condition block for the generation prompt."""
    lines = []
    for field, label in CONDITION_METRICS:
        value = getattr(condition, field)
        lines.append(f"{label}: {'N/A' if value is None else f'{value:.1f}'}")
    notes = "; ".join(condition.notes) if condition.notes else "None"
    lines.append(f"Condition Notes: {notes}")
    return "\n".join(lines)


class PerformanceAnalyzer:
    """Read-only aggregation over a user's plans, results and conditions."""

    def __init__(self, db: Session):
        self.db = db

    def _conditions(self, user_id: int, start: date, end: date) -> List[DailyCondition]:
        return (
            self.db.query(DailyCondition)
            .filter(
                DailyCondition.user_id == user_id,
                DailyCondition.date >= start,
                DailyCondition.date <= end,
            )
            .order_by(DailyCondition.date)
            .all()
        )

    def _sessions_query(self):
        return self.db.query(WorkoutSession).options(
            selectinload(WorkoutSession.workout_exercises).joinedload(WorkoutExercise.exercise),
            selectinload(WorkoutSession.workout_exercises).selectinload(WorkoutExercise.results),
        )

    def analyze_plan(self, plan: TrainingPlan) -> PerformanceSummary:
        """Summarize one plan over its own [start, end] window."""
        sessions = (
            self._sessions_query()
            .filter(WorkoutSession.training_plan_id == plan.id)
            .order_by(WorkoutSession.date)
            .all()
        )
        conditions = self._conditions(plan.user_id, plan.start_date, plan.end_date)
        logger.debug(
            f"Analyzing plan {plan.id}: {len(sessions)} sessions, {len(conditions)} condition entries."
        )
        return summarize(sessions, conditions, plan.start_date, plan.end_date)

    def analyze_range(self, user_id: int, start: date, end: date) -> PerformanceSummary:
        """Summarize every session of the user's plans dated within [start, end]."""
        sessions = (
            self._sessions_query()
            .join(TrainingPlan, WorkoutSession.training_plan_id == TrainingPlan.id)
            .filter(
                TrainingPlan.user_id == user_id,
                WorkoutSession.date >= start,
                WorkoutSession.date <= end,
            )
            .order_by(WorkoutSession.date)
            .all()
        )
        conditions = self._conditions(user_id, start, end)
        return summarize(sessions, conditions, start, end)

    def latest_terminal_plan(self, user_id: int) -> Optional[TrainingPlan]:
        """Most recent Completed or Archived plan, by end date."""
        return (
            self.db.query(TrainingPlan)
            .filter(
                TrainingPlan.user_id == user_id,
                TrainingPlan.status.in_([PlanStatus.COMPLETED, PlanStatus.ARCHIVED]),
            )
            .order_by(TrainingPlan.end_date.desc(), TrainingPlan.id.desc())
            .first()
        )
