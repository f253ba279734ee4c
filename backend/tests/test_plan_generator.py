"""Tests for the weekly plan generator."""

import asyncio
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from fitcoach.config import PlanningRules
from fitcoach.errors import (
    ConflictError,
    GenerationFailedError,
    InvalidGeneratedStructureError,
    NoExercisesAvailableError,
    NotFoundError,
)
from fitcoach.models import (
    ExerciseStatus,
    PlanStatus,
    SessionStatus,
    TrainingPlan,
    WorkoutExercise,
    WorkoutSession,
)
from fitcoach.services.plan_generator_service import (
    PlanGeneratorService,
    as_amount,
    as_count,
    plan_window,
)

from conftest import TODAY, FakePlanAdapter, week_payload


def generate(db, adapter, user, rules=None, today=TODAY):
    service = PlanGeneratorService(db, adapter=adapter, rules=rules)
    return asyncio.run(service.generate_plan(user.id, today=today))


def session_on(plan, weekday_name):
    names = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    return next(s for s in plan.sessions if names[s.date.weekday()] == weekday_name)


def test_generates_full_week(db, make_user, make_exercise, fake_adapter):
    user = make_user()
    push_up = make_exercise("Push-up")

    plan = generate(db, fake_adapter, user)

    assert plan.status == PlanStatus.ACTIVE
    assert plan.name == "Week 1: Foundations"
    assert plan.start_date == TODAY + timedelta(days=1)
    assert plan.end_date == plan.start_date + timedelta(days=6)
    assert len(plan.sessions) == 7
    assert len({s.date for s in plan.sessions}) == 7
    assert all(plan.start_date <= s.date <= plan.end_date for s in plan.sessions)
    assert all(s.status == SessionStatus.PLANNED for s in plan.sessions)

    monday = session_on(plan, "Monday")
    assert monday.name == "Monday Strength"
    assert monday.notes == "Warm up for 5 minutes."
    [we] = monday.workout_exercises
    assert we.exercise_id == push_up.id
    assert we.order == 0
    assert we.sets_planned == 3
    assert we.reps_planned == 12
    assert we.weight_planned is None  # "Bodyweight" is not a number
    assert we.rest_period == 60
    assert we.status == ExerciseStatus.PLANNED

    assert session_on(plan, "Tuesday").workout_exercises == []


def test_prompt_carries_profile_and_catalog(db, make_user, make_exercise, fake_adapter):
    user = make_user(activity_level="Very Active")
    make_exercise("Push-up")
    make_exercise("Barbell Deadlift", equipment="barbell")

    generate(db, fake_adapter, user)

    [prompt] = fake_adapter.prompts
    assert "- Goal: Muscle Gain" in prompt
    assert "- Preferred Training Days: Monday, Wednesday, Friday" in prompt
    assert "between 4 and 5 training sessions" in prompt
    assert "- Push-up (Target: pectorals, Body Part: chest, Equipment: body weight, Secondary: triceps)" in prompt
    assert "Barbell Deadlift" not in prompt
    assert "No previous plan" in prompt


def test_rejects_when_active_plan_exists(db, make_user, make_exercise, make_plan, fake_adapter):
    user = make_user()
    make_exercise("Push-up")
    make_plan(user)

    with pytest.raises(ConflictError):
        generate(db, fake_adapter, user)

    assert fake_adapter.prompts == []
    assert db.query(TrainingPlan).count() == 1


def test_no_matching_exercises(db, make_user, make_exercise, fake_adapter):
    user = make_user(training_location="outdoor")
    make_exercise("Barbell Deadlift", equipment="barbell")

    with pytest.raises(NoExercisesAvailableError):
        generate(db, fake_adapter, user)

    assert db.query(TrainingPlan).count() == 0


def test_missing_profile(db, make_user, fake_adapter):
    user = make_user(with_profile=False)

    with pytest.raises(NotFoundError):
        generate(db, fake_adapter, user)


def test_unknown_exercise_is_skipped_and_order_kept(db, make_user, make_exercise):
    user = make_user()
    push_up = make_exercise("Push-up")
    payload = week_payload()
    payload["sessions"][0]["exercises"] = [
        {"exerciseName": "Flying Kick", "sets": 3, "reps": 10},
        {"exerciseName": "  push-UP ", "sets": "3-4", "reps": 8.0, "weight": 12.5},
    ]

    plan = generate(db, FakePlanAdapter(payload=payload), user)

    [we] = session_on(plan, "Monday").workout_exercises
    assert we.exercise_id == push_up.id
    assert we.order == 1
    assert we.sets_planned is None
    assert we.reps_planned == 8
    assert we.weight_planned == 12.5


def test_unknown_and_duplicate_days_are_skipped(db, make_user, make_exercise):
    user = make_user()
    make_exercise("Push-up")
    payload = week_payload()
    payload["sessions"] = [s for s in payload["sessions"] if s["day"] != "Sunday"]
    payload["sessions"].append({"day": "Funday", "name": "Party", "exercises": []})
    payload["sessions"].append({"day": "monday", "name": "Second Monday", "exercises": []})

    plan = generate(db, FakePlanAdapter(payload=payload), user)

    assert len(plan.sessions) == 7
    assert session_on(plan, "Monday").name == "Monday Strength"
    assert session_on(plan, "Sunday").name == "Rest Day"
    assert all(s.name != "Party" for s in plan.sessions)


def test_loosely_typed_response_still_builds_week(db, make_user, make_exercise):
    user = make_user()
    push_up = make_exercise("Push-up")
    payload = week_payload()
    payload["planName"] = None
    payload["description"] = 42
    payload["sessions"][0]["exercises"] = ["Push-up", {"exerciseName": "Push-up", "sets": 2}]
    payload["sessions"][0]["name"] = ["Upper"]
    payload["sessions"][1]["exercises"] = None
    payload["sessions"][2]["exercises"] = "Push-up x10"
    payload["sessions"].append({"day": None, "name": "Ghost", "exercises": []})
    payload["sessions"].append("Sunday: rest")

    plan = generate(db, FakePlanAdapter(payload=payload), user)

    assert plan.name == "Muscle Gain Plan"
    assert plan.description == "1-week plan for Muscle Gain"
    assert len(plan.sessions) == 7
    monday = session_on(plan, "Monday")
    assert monday.name == "Monday Workout"
    [we] = monday.workout_exercises
    assert we.exercise_id == push_up.id
    assert we.order == 1
    assert we.sets_planned == 2
    assert session_on(plan, "Tuesday").workout_exercises == []
    assert session_on(plan, "Wednesday").workout_exercises == []
    assert all(s.name != "Ghost" for s in plan.sessions)


def test_session_without_day_is_skipped(db, make_user, make_exercise):
    user = make_user()
    make_exercise("Push-up")
    payload = {"sessions": [{"name": "Legs", "exercises": []}]}

    with pytest.raises(InvalidGeneratedStructureError):
        generate(db, FakePlanAdapter(payload=payload), user)

    assert db.query(TrainingPlan).count() == 0


def test_failure_while_writing_sessions_rolls_back_everything(db, make_user, make_exercise, fake_adapter, monkeypatch):
    user = make_user()
    make_exercise("Push-up")
    original = PlanGeneratorService._create_session
    calls = []

    def create_then_fail(self, *args, **kwargs):
        calls.append(args[1])
        if len(calls) == 4:
            raise RuntimeError("disk full")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(PlanGeneratorService, "_create_session", create_then_fail)

    with pytest.raises(RuntimeError):
        generate(db, fake_adapter, user)

    db.expire_all()
    assert len(calls) == 4
    assert db.query(TrainingPlan).count() == 0
    assert db.query(WorkoutSession).count() == 0
    assert db.query(WorkoutExercise).count() == 0


def test_generation_failure_persists_nothing(db, make_user, make_exercise, failing_adapter):
    user = make_user()
    make_exercise("Push-up")

    with pytest.raises(GenerationFailedError):
        generate(db, failing_adapter, user)

    assert db.query(TrainingPlan).count() == 0
    assert db.query(WorkoutSession).count() == 0


def test_empty_sessions_is_invalid_structure(db, make_user, make_exercise):
    user = make_user()
    make_exercise("Push-up")

    with pytest.raises(InvalidGeneratedStructureError):
        generate(db, FakePlanAdapter(payload={"planName": "Empty", "sessions": []}), user)

    assert db.query(TrainingPlan).count() == 0


def test_next_plan_follows_previous_and_includes_analysis(db, make_user, make_exercise, make_plan, fake_adapter):
    user = make_user()
    make_exercise("Push-up")
    previous = make_plan(user, start=TODAY - timedelta(days=3), status=PlanStatus.COMPLETED)

    plan = generate(db, fake_adapter, user)

    assert plan.start_date == previous.end_date + timedelta(days=1)
    prompt = fake_adapter.prompts[0]
    assert "--- Performance Summary ---" in prompt
    assert "- Push-up: Planned: 2 sets, 10 reps" in prompt
    assert "Average Sleep Hours: N/A" in prompt


def test_injected_rules_change_equipment(db, make_user, make_exercise):
    user = make_user(training_location="garage")
    make_exercise("Push-up")
    swing = make_exercise("Kettlebell Swing", equipment="kettlebell", target="glutes", body_part="upper legs")
    rules = PlanningRules(equipment_by_location={"home": ["kettlebell"]}, default_location="home")
    adapter = FakePlanAdapter(payload=week_payload(exercise_name="Kettlebell Swing"))

    plan = generate(db, adapter, user, rules=rules)

    assert "Kettlebell Swing" in adapter.prompts[0]
    assert "Push-up" not in adapter.prompts[0]
    assert session_on(plan, "Friday").workout_exercises[0].exercise_id == swing.id


def test_concurrent_generation_loses_cleanly(db, session_factory, make_user, make_exercise):
    user = make_user()
    user_id = user.id
    make_exercise("Push-up")

    class RacingAdapter(FakePlanAdapter):
        async def generate_structured_plan(self, prompt):
            # Another request for the same user finishes first.
            other = session_factory()
            other.add(
                TrainingPlan(
                    user_id=user_id,
                    name="Winner",
                    start_date=TODAY,
                    end_date=TODAY + timedelta(days=6),
                    status=PlanStatus.ACTIVE,
                )
            )
            other.commit()
            other.close()
            return await super().generate_structured_plan(prompt)

    with pytest.raises(ConflictError):
        generate(db, RacingAdapter(payload=week_payload()), user)

    db.expire_all()
    plans = db.query(TrainingPlan).filter(TrainingPlan.user_id == user_id).all()
    assert [p.name for p in plans] == ["Winner"]
    assert db.query(WorkoutExercise).count() == 0


def test_storage_rejects_second_active_plan(db, make_user, make_plan):
    user = make_user()
    make_plan(user)

    db.add(
        TrainingPlan(
            user_id=user.id,
            start_date=TODAY,
            end_date=TODAY + timedelta(days=6),
            status=PlanStatus.ACTIVE,
        )
    )
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_plan_window():
    assert plan_window(None, date(2025, 6, 11)) == (date(2025, 6, 12), date(2025, 6, 18))
    # A previous plan ending long ago does not push the start into the past
    assert plan_window(date(2025, 5, 1), date(2025, 6, 11))[0] == date(2025, 6, 12)
    assert plan_window(date(2025, 6, 15), date(2025, 6, 11))[0] == date(2025, 6, 16)


def test_numeric_targets():
    assert as_count(3) == 3
    assert as_count(3.0) == 3
    assert as_count(3.5) is None
    assert as_count("3-4") is None
    assert as_count(True) is None
    assert as_count(-1) is None
    assert as_amount(22.5) == 22.5
    assert as_amount("50kg") is None
    assert as_amount(float("nan")) is None
