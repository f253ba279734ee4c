"""Shared fixtures: in-memory database, factories and a fake plan generator."""

import os
import tempfile

# Settings are read at import time, so configure them before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="fitcoach-logs-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import date, timedelta

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fitcoach.database import Base
from fitcoach.errors import GenerationFailedError
from fitcoach.models import (
    DailyCondition,
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
from fitcoach.schemas import PlanDraft
from fitcoach.services.llm_service import PlanGenerationAdapter

TODAY = date(2025, 6, 11)  # a Wednesday


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============== Factories ==============


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(with_profile=True, **profile_fields):
        counter["n"] += 1
        user = User(email=f"user{counter['n']}@example.com", name=f"User {counter['n']}")
        db.add(user)
        db.flush()
        if with_profile:
            fields = {
                "goals": "Muscle Gain",
                "experience": "Beginner",
                "activity_level": "Moderately Active",
                "training_location": "home",
                "preferred_training_days": ["Monday", "Wednesday", "Friday"],
                "wants_pre_workout_info": True,
                "weight": 72.5,
                "height": 178,
            }
            fields.update(profile_fields)
            db.add(UserProfile(user_id=user.id, **fields))
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_exercise(db):
    def _make_exercise(name, equipment="body weight", target="pectorals", body_part="chest"):
        exercise = Exercise(
            name=name,
            equipment=equipment,
            target_muscle=target,
            body_part=body_part,
            secondary_muscles=["triceps"],
        )
        db.add(exercise)
        db.commit()
        return exercise

    return _make_exercise


@pytest.fixture
def make_plan(db, make_exercise):
    """Build a plan from a compact description.

    ``sessions`` is a list of (day offset, [sets_planned, ...]) tuples; each
    entry in the inner list becomes one planned exercise.
    """
    default_exercise = {}

    def _exercise():
        if "ex" not in default_exercise:
            default_exercise["ex"] = make_exercise("Push-up")
        return default_exercise["ex"]

    def _make_plan(user, start=TODAY, sessions=((0, [2]),), status=PlanStatus.ACTIVE, length=7):
        plan = TrainingPlan(
            user_id=user.id,
            name="Test Plan",
            start_date=start,
            end_date=start + timedelta(days=length - 1),
            status=status,
        )
        db.add(plan)
        db.flush()
        for offset, sets_list in sessions:
            session = WorkoutSession(
                training_plan_id=plan.id,
                name=f"Day {offset}",
                date=start + timedelta(days=offset),
                status=SessionStatus.PLANNED,
            )
            db.add(session)
            db.flush()
            for order, sets_planned in enumerate(sets_list):
                db.add(
                    WorkoutExercise(
                        workout_session_id=session.id,
                        exercise_id=_exercise().id,
                        order=order,
                        sets_planned=sets_planned,
                        reps_planned=10,
                        status=ExerciseStatus.PLANNED,
                    )
                )
        db.commit()
        db.refresh(plan)
        return plan

    return _make_plan


@pytest.fixture
def make_condition(db):
    def _make_condition(user, day, **fields):
        condition = DailyCondition(user_id=user.id, date=day, **fields)
        db.add(condition)
        db.commit()
        return condition

    return _make_condition


# ============== Fake generator ==============


class FakePlanAdapter(PlanGenerationAdapter):
    """Returns a canned draft (or raises) and records the prompts it received."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.prompts = []

    async def generate_structured_plan(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return PlanDraft.model_validate(self.payload)


def week_payload(exercise_name="Push-up", days=("Monday", "Wednesday", "Friday")):
    """A generator response with training on ``days`` and rest on the others."""
    sessions = []
    for day in ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]:
        if day in days:
            sessions.append(
                {
                    "day": day,
                    "name": f"{day} Strength",
                    "exercises": [
                        {"exerciseName": exercise_name, "sets": 3, "reps": 12, "weight": "Bodyweight", "rest": 60},
                    ],
                    "notes": "Warm up for 5 minutes.",
                }
            )
        else:
            sessions.append({"day": day, "name": "Rest Day", "exercises": [], "notes": None})
    return {"planName": "Week 1: Foundations", "description": "Full body basics.", "sessions": sessions}


@pytest.fixture
def fake_adapter():
    return FakePlanAdapter(payload=week_payload())


@pytest.fixture
def failing_adapter():
    return FakePlanAdapter(error=GenerationFailedError("Plan generation timed out."))
