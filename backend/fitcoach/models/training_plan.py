"""Training plan, workout session and planned exercise models."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from fitcoach.database import Base
from fitcoach.models.status import (
    ExerciseStatus,
    PlanStatus,
    SessionStatus,
    status_column_type,
)


class TrainingPlan(Base):
    """One scheduling period (a week) for one user."""

    __tablename__ = "training_plans"
    __table_args__ = (
        # At most one Active plan per user, enforced by the database.
        Index(
            "uq_training_plans_one_active_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'Active'"),
            sqlite_where=text("status = 'Active'"),
        ),
        CheckConstraint("end_date >= start_date", name="ck_training_plans_date_window"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False, index=True)

    status = Column(status_column_type(PlanStatus), nullable=False, default=PlanStatus.ACTIVE, index=True)
    is_customized = Column(Boolean, default=False)  # True once the user hand-edits it

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="training_plans")
    sessions = relationship(
        "WorkoutSession",
        back_populates="training_plan",
        cascade="all, delete-orphan",
        order_by="WorkoutSession.date",
    )

    def __repr__(self):
        return f"<TrainingPlan {self.id} {self.start_date}..{self.end_date} [{self.status}]>"


class WorkoutSession(Base):
    """One scheduled training day within a plan."""

    __tablename__ = "workout_sessions"

    id = Column(Integer, primary_key=True, index=True)
    training_plan_id = Column(Integer, ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=True)  # "Upper Body", "Rest Day"
    date = Column(Date, nullable=False, index=True)
    status = Column(status_column_type(SessionStatus), nullable=False, default=SessionStatus.PLANNED)
    notes = Column(Text, nullable=True)

    duration_planned = Column(Integer, nullable=True)  # minutes
    duration_actual = Column(Integer, nullable=True)  # minutes

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    training_plan = relationship("TrainingPlan", back_populates="sessions")
    workout_exercises = relationship(
        "WorkoutExercise",
        back_populates="workout_session",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order",
    )

    def __repr__(self):
        return f"<WorkoutSession {self.id} {self.date} - {self.name} [{self.status}]>"


class WorkoutExercise(Base):
    """A planned occurrence of a catalog exercise inside a session."""

    __tablename__ = "workout_exercises"
    __table_args__ = (
        CheckConstraint("sets_planned IS NULL OR sets_planned >= 0", name="ck_workout_exercises_sets"),
        CheckConstraint("reps_planned IS NULL OR reps_planned >= 0", name="ck_workout_exercises_reps"),
        CheckConstraint("weight_planned IS NULL OR weight_planned >= 0", name="ck_workout_exercises_weight"),
    )

    id = Column(Integer, primary_key=True, index=True)
    workout_session_id = Column(Integer, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False, index=True)

    order = Column(Integer, nullable=False, default=0)  # display sequence within the session

    # Targets
    sets_planned = Column(Integer, nullable=True)
    reps_planned = Column(Integer, nullable=True)
    weight_planned = Column(Float, nullable=True)  # kg
    duration_planned = Column(Integer, nullable=True)  # seconds
    rest_period = Column(Integer, nullable=True)  # seconds
    notes = Column(Text, nullable=True)

    status = Column(status_column_type(ExerciseStatus), nullable=False, default=ExerciseStatus.PLANNED)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    workout_session = relationship("WorkoutSession", back_populates="workout_exercises")
    exercise = relationship("Exercise")
    results = relationship(
        "ExerciseResult",
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseResult.set_number",
    )

    def __repr__(self):
        return f"<WorkoutExercise {self.id} #{self.order} exercise={self.exercise_id} [{self.status}]>"
