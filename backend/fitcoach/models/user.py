"""User account and training profile models."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from fitcoach.database import Base


class User(Base):
    """User account. Credentials are managed by the auth service."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    name = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    is_active = Column(Boolean, default=True)

    # Relationships
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    training_plans = relationship("TrainingPlan", back_populates="user", cascade="all, delete-orphan")
    daily_conditions = relationship("DailyCondition", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class UserProfile(Base):
    """Training profile the plan generator reads from."""

    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)

    goals = Column(String(100), nullable=False)  # "Weight Loss", "Muscle Gain", ...
    experience = Column(String(50), nullable=False)  # Beginner, Intermediate, Advanced
    activity_level = Column(String(50), nullable=False)  # Sedentary ... Extremely Active
    training_location = Column(String(50), nullable=False, default="home")  # home, gym, outdoor
    preferred_training_days = Column(JSON, default=list)  # ["Monday", "Wednesday"]
    wants_pre_workout_info = Column(Boolean, default=True)

    weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")
