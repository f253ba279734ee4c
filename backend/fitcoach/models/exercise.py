"""Exercise catalog model."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON
from datetime import datetime

from fitcoach.database import Base


class Exercise(Base):
    """A catalog exercise. Shared by every plan that schedules it."""

    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    target_muscle = Column(String(100), nullable=True)
    body_part = Column(String(100), nullable=True)
    equipment = Column(String(100), nullable=True, index=True)  # "body weight", "barbell", ...
    secondary_muscles = Column(JSON, default=list)
    description = Column(Text, nullable=True)
    is_custom = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def prompt_line(self) -> str:
        """One catalog entry as shown to the plan generator."""
        secondary = ", ".join(self.secondary_muscles) if self.secondary_muscles else "None"
        return (
            f"- {self.name} (Target: {self.target_muscle or 'N/A'}, "
            f"Body Part: {self.body_part or 'N/A'}, "
            f"Equipment: {self.equipment or 'N/A'}, Secondary: {secondary})"
        )

    def __repr__(self):
        return f"<Exercise {self.id} {self.name} ({self.equipment})>"
