"""AI-powered weekly training plan generator with performance-aware adaptation."""

import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from fitcoach.config import PlanningRules, get_planning_rules
from fitcoach.database import transaction
from fitcoach.errors import (
    ConflictError,
    InvalidGeneratedStructureError,
    NoExercisesAvailableError,
    NotFoundError,
)
from fitcoach.models import (
    Exercise,
    ExerciseStatus,
    PlanStatus,
    SessionStatus,
    TrainingPlan,
    User,
    UserProfile,
    WorkoutExercise,
    WorkoutSession,
)
from fitcoach.schemas import DraftExercise, DraftSession, PlanDraft
from fitcoach.services.analysis_service import (
    PerformanceAnalyzer,
    empty_summary,
    format_condition,
    format_performance,
)
from fitcoach.services.llm_service import GeminiPlanAdapter, PlanGenerationAdapter
from fitcoach.services.plan_prompt import GenerationRequest, render_prompt

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
PLAN_LENGTH_DAYS = 7
REST_DAY_NAME = "Rest Day"

ACTIVE_PLAN_EXISTS = (
    "You already have an active training plan. "
    "Please complete or archive it before generating a new one."
)


def plan_window(previous_end: Optional[date], today: date) -> Tuple[date, date]:
    """Start the day after the previous plan ended, never earlier than tomorrow."""
    start = today + timedelta(days=1)
    if previous_end is not None:
        start = max(start, previous_end + timedelta(days=1))
    return start, start + timedelta(days=PLAN_LENGTH_DAYS - 1)


def week_dates(start: date) -> Dict[str, date]:
    """Map lowercase weekday names to their date in the 7-day window from ``start``."""
    dates = (start + timedelta(days=i) for i in range(PLAN_LENGTH_DAYS))
    return {DAYS_OF_WEEK[d.weekday()].lower(): d for d in dates}


def as_count(value: Any) -> Optional[int]:
    """A planned integer target, or None if the generator sent something non-numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def as_amount(value: Any) -> Optional[float]:
    """A planned real-valued target (weight), or None for descriptors like "Bodyweight"."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return float(value)


def as_text(value: Any) -> Optional[str]:
    """A non-blank string from the generator, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class PlanGeneratorService:
    """Builds the next week's plan for a user from their profile and history."""

    def __init__(
        self,
        db: Session,
        adapter: Optional[PlanGenerationAdapter] = None,
        rules: Optional[PlanningRules] = None,
    ):
        self.db = db
        self.adapter = adapter or GeminiPlanAdapter()
        self.rules = rules or get_planning_rules()
        self.analyzer = PerformanceAnalyzer(db)

    def _has_active_plan(self, user_id: int) -> bool:
        return (
            self.db.query(TrainingPlan.id)
            .filter(TrainingPlan.user_id == user_id, TrainingPlan.status == PlanStatus.ACTIVE)
            .first()
            is not None
        )

    def _available_exercises(self, profile: UserProfile) -> List[Exercise]:
        equipment = self.rules.equipment_for(profile.training_location)
        logger.info(
            f"Generating plan for user {profile.user_id} at {profile.training_location}. "
            f"Available equipment: {', '.join(equipment)}"
        )
        return (
            self.db.query(Exercise)
            .filter(Exercise.equipment.in_(equipment))
            .order_by(Exercise.name)
            .all()
        )

    def build_request(
        self, profile: UserProfile, exercises: List[Exercise], previous: Optional[TrainingPlan]
    ) -> GenerationRequest:
        """Collect profile, catalog and last plan's analysis into a generation request."""
        summary = self.analyzer.analyze_plan(previous) if previous else empty_summary()
        return GenerationRequest(
            goals=profile.goals,
            experience=profile.experience,
            activity_level=profile.activity_level,
            training_location=profile.training_location,
            frequency=self.rules.frequency_for(profile.activity_level),
            exercise_catalog=[ex.prompt_line() for ex in exercises],
            preferred_training_days=list(profile.preferred_training_days or []),
            weight=profile.weight,
            height=profile.height,
            wants_pre_workout_info=bool(profile.wants_pre_workout_info),
            performance_text=format_performance(summary),
            condition_text=format_condition(summary.condition),
            has_history=previous is not None,
        )

    async def generate_plan(self, user_id: int, today: Optional[date] = None) -> TrainingPlan:
        """
        Generate and persist the next weekly plan for a user.

        Reads happen first and the read transaction is released before the
        external generation call; the plan and all of its sessions and
        exercises are then written in a single transaction.
        """
        today = today or date.today()

        profile = self.db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
        if profile is None:
            raise NotFoundError("User profile not found. Complete your profile before generating a plan.")

        if self._has_active_plan(user_id):
            logger.warning(f"User {user_id} already has an active plan. Generation request blocked.")
            raise ConflictError(ACTIVE_PLAN_EXISTS)

        exercises = self._available_exercises(profile)
        if not exercises:
            raise NoExercisesAvailableError(
                f"No exercises found matching your training location ({profile.training_location}). "
                "Try changing it in your profile."
            )
        logger.info(f"Found {len(exercises)} exercises matching criteria.")

        previous = self.analyzer.latest_terminal_plan(user_id)
        request = self.build_request(profile, exercises, previous)
        prompt = render_prompt(request)

        # First catalog entry wins when two exercises share a name.
        lookup: Dict[str, int] = {}
        for ex in exercises:
            lookup.setdefault(ex.name.strip().lower(), ex.id)
        goals = profile.goals
        previous_end = previous.end_date if previous else None

        # Do not hold a transaction open across the external call.
        self.db.rollback()

        logger.info(f"Prompt constructed for user {user_id}. Calling generation service...")
        draft = await self.adapter.generate_structured_plan(prompt)

        if not draft.sessions:
            raise InvalidGeneratedStructureError("The generated plan contains no sessions.")

        start_date, end_date = plan_window(previous_end, today)
        by_date = self._sessions_by_date(draft, start_date)
        if not by_date:
            raise InvalidGeneratedStructureError("The generated plan has no recognizable days of the week.")

        with transaction(self.db, conflict_message=ACTIVE_PLAN_EXISTS):
            user = self.db.query(User).filter(User.id == user_id).with_for_update().first()
            if user is None:
                raise NotFoundError(f"User with ID {user_id} not found.")
            if self._has_active_plan(user_id):
                raise ConflictError(ACTIVE_PLAN_EXISTS)

            plan = TrainingPlan(
                user_id=user_id,
                name=as_text(draft.plan_name) or f"{goals} Plan",
                description=as_text(draft.description) or f"1-week plan for {goals}",
                start_date=start_date,
                end_date=end_date,
                status=PlanStatus.ACTIVE,
                is_customized=False,
            )
            self.db.add(plan)
            self.db.flush()
            logger.info(f"TrainingPlan created with ID: {plan.id} ({start_date} to {end_date})")

            for offset in range(PLAN_LENGTH_DAYS):
                session_date = start_date + timedelta(days=offset)
                self._create_session(plan, session_date, by_date.get(session_date), lookup)

        self.db.refresh(plan)
        logger.info(f"Plan generation and saving complete for user {user_id}.")
        return plan

    def _sessions_by_date(self, draft: PlanDraft, start_date: date) -> Dict[date, DraftSession]:
        dates = week_dates(start_date)
        by_date: Dict[date, DraftSession] = {}
        for entry in draft.sessions:
            if not isinstance(entry.day, str):
                logger.warning(f"Skipping session without a day label: {entry.day!r}")
                continue
            session_date = dates.get(entry.day.strip().lower())
            if session_date is None:
                logger.warning(f"Skipping session for unknown day: {entry.day}")
                continue
            if session_date in by_date:
                logger.warning(f"Skipping duplicate session for day: {entry.day}")
                continue
            by_date[session_date] = entry
        return by_date

    def _create_session(
        self,
        plan: TrainingPlan,
        session_date: date,
        entry: Optional[DraftSession],
        lookup: Dict[str, int],
    ) -> WorkoutSession:
        day_name = DAYS_OF_WEEK[session_date.weekday()]
        if entry is None:
            name, notes, exercises = REST_DAY_NAME, None, []
        else:
            if entry.exercises is not None and not isinstance(entry.exercises, list):
                logger.warning(f"Exercises for {day_name} are not a list; treating it as a rest day.")
            name = as_text(entry.name) or f"{day_name} Workout"
            notes, exercises = as_text(entry.notes), entry.exercise_entries()

        session = WorkoutSession(
            training_plan_id=plan.id,
            name=name,
            date=session_date,
            status=SessionStatus.PLANNED,
            notes=notes,
        )
        self.db.add(session)
        self.db.flush()
        logger.debug(f"WorkoutSession created for {day_name} ({session_date}) with ID: {session.id}")

        for index, item in enumerate(exercises):
            if item is None:
                logger.warning(f"Skipping malformed exercise entry {index} in session {session.id}.")
                continue
            exercise_id = self._resolve(item, lookup)
            if exercise_id is None:
                logger.warning(
                    f'Could not find exercise ID for name: "{item.exercise_name}". '
                    f"Skipping this exercise in session {session.id}."
                )
                continue
            self.db.add(
                WorkoutExercise(
                    workout_session_id=session.id,
                    exercise_id=exercise_id,
                    order=index,
                    sets_planned=as_count(item.sets),
                    reps_planned=as_count(item.reps),
                    weight_planned=as_amount(item.weight),
                    duration_planned=as_count(item.duration),
                    rest_period=as_count(item.rest),
                    notes=as_text(item.notes),
                    status=ExerciseStatus.PLANNED,
                )
            )
        return session

    @staticmethod
    def _resolve(item: DraftExercise, lookup: Dict[str, int]) -> Optional[int]:
        if not isinstance(item.exercise_name, str):
            return None
        return lookup.get(item.exercise_name.strip().lower())
