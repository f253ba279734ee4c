"""Logged set results."""

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from fitcoach.database import Base


class ExerciseResult(Base):
    """One logged set of a planned exercise.

    ``user_id`` is a copy of the plan owner, kept for querying a user's
    history without walking exercise -> session -> plan.
    """

    __tablename__ = "exercise_results"
    __table_args__ = (
        CheckConstraint("set_number >= 1", name="ck_exercise_results_set_number"),
        CheckConstraint("reps_completed IS NULL OR reps_completed >= 0", name="ck_exercise_results_reps"),
        CheckConstraint("weight_used IS NULL OR weight_used >= 0", name="ck_exercise_results_weight"),
        CheckConstraint("duration_completed IS NULL OR duration_completed >= 0", name="ck_exercise_results_duration"),
    )

    id = Column(Integer, primary_key=True, index=True)
    workout_exercise_id = Column(Integer, ForeignKey("workout_exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    set_number = Column(Integer, nullable=False)
    reps_completed = Column(Integer, nullable=True)
    weight_used = Column(Float, nullable=True)  # kg
    duration_completed = Column(Integer, nullable=True)  # seconds
    rating = Column(Integer, nullable=True)  # 1-10 perceived effort
    notes = Column(Text, nullable=True)

    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    workout_exercise = relationship("WorkoutExercise", back_populates="results")

    def __repr__(self):
        return f"<ExerciseResult {self.id} set={self.set_number} reps={self.reps_completed} weight={self.weight_used}>"
