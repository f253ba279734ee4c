"""Daily condition model for subjective wellness feedback."""

from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Text, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from fitcoach.database import Base


class DailyCondition(Base):
    """A user's self-reported wellness for one calendar date."""

    __tablename__ = "daily_conditions"
    __table_args__ = (
        # A user only has one condition entry per day
        UniqueConstraint("user_id", "date", name="uq_daily_conditions_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    # Subjective metrics
    sleep_hours = Column(Float, nullable=True)
    sleep_quality = Column(Integer, nullable=True)  # 1-5
    energy_level = Column(Integer, nullable=True)  # 1-5
    stress_level = Column(Integer, nullable=True)  # 1-5
    muscle_soreness = Column(Integer, nullable=True)  # 1-5

    # Notes
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="daily_conditions")

    def __repr__(self):
        return f"<DailyCondition {self.date} - sleep:{self.sleep_hours} energy:{self.energy_level}>"
