"""Pydantic schemas for API request/response validation."""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime, date

from fitcoach.models.status import ExerciseStatus, PlanStatus, SessionStatus

logger = logging.getLogger(__name__)


# ============== Exercise Catalog Schemas ==============

class ExerciseResponse(BaseModel):
    id: int
    name: str
    target_muscle: Optional[str] = None
    body_part: Optional[str] = None
    equipment: Optional[str] = None
    secondary_muscles: List[str] = []

    model_config = ConfigDict(from_attributes=True)


# ============== Exercise Result Schemas ==============

class ExerciseResultCreate(BaseModel):
    set_number: int = Field(..., ge=1)
    reps_completed: Optional[int] = Field(None, ge=0)
    weight_used: Optional[float] = Field(None, ge=0)
    duration_completed: Optional[int] = Field(None, ge=0)  # seconds
    rating: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None


class ExerciseResultResponse(ExerciseResultCreate):
    id: int
    workout_exercise_id: int
    user_id: int
    completed_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Workout Exercise Schemas ==============

class WorkoutExerciseTargets(BaseModel):
    sets_planned: Optional[int] = Field(None, ge=0)
    reps_planned: Optional[int] = Field(None, ge=0)
    weight_planned: Optional[float] = Field(None, ge=0)
    duration_planned: Optional[int] = Field(None, ge=0)  # seconds
    rest_period: Optional[int] = Field(None, ge=0)  # seconds
    notes: Optional[str] = None


class WorkoutExerciseCreate(WorkoutExerciseTargets):
    exercise_id: int
    order: Optional[int] = Field(None, ge=0)


class WorkoutExerciseUpdate(WorkoutExerciseTargets):
    order: Optional[int] = Field(None, ge=0)


class SwapExerciseRequest(BaseModel):
    new_exercise_id: int


class ExerciseStatusUpdate(BaseModel):
    status: ExerciseStatus

    @field_validator("status")
    @classmethod
    def _manual_targets_only(cls, value):
        if value not in (ExerciseStatus.COMPLETED, ExerciseStatus.SKIPPED):
            raise ValueError("status must be Completed or Skipped")
        return value


class WorkoutExerciseResponse(WorkoutExerciseTargets):
    id: int
    workout_session_id: int
    exercise_id: int
    order: int
    status: ExerciseStatus
    exercise: Optional[ExerciseResponse] = None
    results: List[ExerciseResultResponse] = []

    model_config = ConfigDict(from_attributes=True)


# ============== Workout Session Schemas ==============

class SessionStatusUpdate(BaseModel):
    status: SessionStatus

    @field_validator("status")
    @classmethod
    def _manual_targets_only(cls, value):
        if value not in (SessionStatus.COMPLETED, SessionStatus.SKIPPED):
            raise ValueError("status must be Completed or Skipped")
        return value


class WorkoutSessionSummary(BaseModel):
    id: int
    training_plan_id: int
    name: Optional[str] = None
    date: date
    status: SessionStatus
    notes: Optional[str] = None
    duration_planned: Optional[int] = None
    duration_actual: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class WorkoutSessionResponse(WorkoutSessionSummary):
    workout_exercises: List[WorkoutExerciseResponse] = []


# ============== Training Plan Schemas ==============

class PlanStatusUpdate(BaseModel):
    status: PlanStatus


class TrainingPlanResponse(BaseModel):
    id: int
    user_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: date
    end_date: date
    status: PlanStatus
    is_customized: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TrainingPlanDetail(TrainingPlanResponse):
    sessions: List[WorkoutSessionResponse] = []


# ============== Daily Condition Schemas ==============

class DailyConditionUpdate(BaseModel):
    sleep_hours: Optional[float] = Field(None, ge=0, le=24)
    sleep_quality: Optional[int] = Field(None, ge=1, le=5)
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)
    muscle_soreness: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None


class DailyConditionCreate(DailyConditionUpdate):
    date: date


class DailyConditionResponse(DailyConditionCreate):
    id: int
    user_id: int

    model_config = ConfigDict(from_attributes=True)


# ============== Performance Analysis Schemas ==============

class VolumeTotals(BaseModel):
    sets: float = 0
    reps: float = 0
    weight: float = 0
    duration: float = 0
    count: int = 0


class ExercisePerformance(BaseModel):
    planned: VolumeTotals = Field(default_factory=VolumeTotals)
    actual: VolumeTotals = Field(default_factory=VolumeTotals)
    skipped_count: int = 0
    notes: List[str] = []


class ConditionAverages(BaseModel):
    entries: int = 0
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[float] = None
    energy_level: Optional[float] = None
    stress_level: Optional[float] = None
    muscle_soreness: Optional[float] = None
    notes: List[str] = []


class PerformanceSummary(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_sessions: int = 0
    completed_sessions: int = 0
    skipped_sessions: int = 0
    completion_rate: float = 0.0  # fraction, 0..1
    exercises: Dict[str, ExercisePerformance] = {}
    session_notes: List[str] = []
    condition: ConditionAverages = Field(default_factory=ConditionAverages)


# ============== Stats Schemas ==============

class ExercisePerformancePoint(BaseModel):
    period_start: date
    total_sets: int = 0
    max_weight: Optional[float] = None
    average_reps: Optional[float] = None
    average_duration: Optional[float] = None  # seconds


class SessionStatsPoint(BaseModel):
    period_start: date
    total_sessions: int = 0
    completed_count: int = 0
    skipped_count: int = 0
    planned_count: int = 0


class ConditionStatsPoint(BaseModel):
    period_start: date
    total_entries: int = 0
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[float] = None
    energy_level: Optional[float] = None
    stress_level: Optional[float] = None
    muscle_soreness: Optional[float] = None


# ============== Generated Plan Draft ==============

class DraftExercise(BaseModel):
    """One exercise entry from the generator. Every field keeps its raw JSON type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    exercise_name: Any = Field(None, alias="exerciseName")
    sets: Any = None
    reps: Any = None
    weight: Any = None
    duration: Any = None
    rest: Any = None
    notes: Any = None


class DraftSession(BaseModel):
    """One day entry. Malformed fields are kept as-is and skipped during mapping."""

    model_config = ConfigDict(extra="ignore")

    day: Any = None
    name: Any = None
    exercises: Any = None  # a list of exercise objects, or null for a rest day
    notes: Any = None

    def exercise_entries(self) -> List[Optional[DraftExercise]]:
        """Exercise entries in array order; entries that are not objects become None."""
        if not isinstance(self.exercises, list):
            return []
        return [
            DraftExercise.model_validate(item) if isinstance(item, dict) else None
            for item in self.exercises
        ]


class PlanDraft(BaseModel):
    """The structured plan the generation service returns."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    plan_name: Any = Field(None, alias="planName")
    description: Any = None
    sessions: List[DraftSession] = []

    @field_validator("sessions", mode="before")
    @classmethod
    def _day_objects_only(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            kept = [entry for entry in value if isinstance(entry, dict)]
            if len(kept) != len(value):
                logger.warning(f"Dropped {len(value) - len(kept)} session entries that are not objects.")
            return kept
        return value
