"""Tests for the performance analyzer."""

from datetime import timedelta

import pytest

from fitcoach.models import ExerciseResult, ExerciseStatus, PlanStatus, SessionStatus
from fitcoach.services.analysis_service import (
    PerformanceAnalyzer,
    empty_summary,
    format_condition,
    format_performance,
)

from conftest import TODAY


def log_set(db, we, user, set_number, reps=None, weight=None, notes=None):
    db.add(
        ExerciseResult(
            workout_exercise_id=we.id,
            user_id=user.id,
            set_number=set_number,
            reps_completed=reps,
            weight_used=weight,
            notes=notes,
        )
    )


def test_plan_summary_counts_and_volumes(db, make_user, make_plan):
    user = make_user()
    plan = make_plan(user, sessions=[(0, [3]), (2, [2]), (4, [])])
    done, skipped, open_session = plan.sessions

    done.status = SessionStatus.COMPLETED
    we = done.workout_exercises[0]
    we.status = ExerciseStatus.COMPLETED
    log_set(db, we, user, 1, reps=10, weight=20)
    log_set(db, we, user, 2, reps=8, weight=None, notes="felt heavy")

    skipped.status = SessionStatus.SKIPPED
    skipped.workout_exercises[0].status = ExerciseStatus.SKIPPED
    db.commit()

    summary = PerformanceAnalyzer(db).analyze_plan(plan)

    assert summary.total_sessions == 3
    assert summary.completed_sessions == 1
    assert summary.skipped_sessions == 1
    assert summary.completion_rate == pytest.approx(1 / 3)

    push_up = summary.exercises["Push-up"]
    assert push_up.planned.sets == 5
    assert push_up.planned.reps == 20
    assert push_up.planned.count == 2
    assert push_up.actual.sets == 2
    assert push_up.actual.reps == 18
    assert push_up.actual.weight == 20
    assert push_up.skipped_count == 1
    assert "- Push-up (Set 2): felt heavy" in push_up.notes


def test_zero_sessions_gives_zero_completion_rate(db, make_user, make_plan):
    user = make_user()
    plan = make_plan(user, sessions=[])

    summary = PerformanceAnalyzer(db).analyze_plan(plan)

    assert summary.total_sessions == 0
    assert summary.completion_rate == 0


def test_condition_averages_absent_without_entries(db, make_user, make_plan):
    user = make_user()
    plan = make_plan(user)

    condition = PerformanceAnalyzer(db).analyze_plan(plan).condition

    assert condition.entries == 0
    assert condition.sleep_hours is None
    assert condition.energy_level is None
    assert condition.muscle_soreness is None
    assert "Average Sleep Hours: N/A" in format_condition(condition)


def test_condition_averages_treat_missing_values_as_zero(db, make_user, make_plan, make_condition):
    user = make_user()
    plan = make_plan(user)
    make_condition(user, TODAY, sleep_hours=8, energy_level=4, notes="great day")
    make_condition(user, TODAY + timedelta(days=1), sleep_hours=6, energy_level=None)
    # Outside the plan window, ignored
    make_condition(user, TODAY + timedelta(days=10), sleep_hours=1)

    condition = PerformanceAnalyzer(db).analyze_plan(plan).condition

    assert condition.entries == 2
    assert condition.sleep_hours == pytest.approx(7.0)
    assert condition.energy_level == pytest.approx(2.0)
    assert condition.notes == [f"- {TODAY.isoformat()}: great day"]


def test_latest_terminal_plan_ignores_active_and_paused(db, make_user, make_plan):
    user = make_user()
    older = make_plan(user, start=TODAY - timedelta(days=14), status=PlanStatus.COMPLETED)
    newer = make_plan(user, start=TODAY - timedelta(days=7), status=PlanStatus.ARCHIVED)
    make_plan(user, start=TODAY, status=PlanStatus.ACTIVE)
    make_plan(user, start=TODAY + timedelta(days=7), status=PlanStatus.PAUSED)

    latest = PerformanceAnalyzer(db).latest_terminal_plan(user.id)

    assert latest.id == newer.id
    assert latest.id != older.id


def test_analyze_range_only_sees_own_sessions(db, make_user, make_plan):
    user = make_user()
    other = make_user()
    make_plan(user, sessions=[(0, [1]), (6, [1])])
    make_plan(other, sessions=[(1, [1])])

    summary = PerformanceAnalyzer(db).analyze_range(user.id, TODAY, TODAY + timedelta(days=3))

    assert summary.total_sessions == 1


def test_format_performance_text():
    summary = empty_summary()
    text = format_performance(summary)

    assert "Overall Session Completion Rate: 0.0%" in text
    assert "No exercise data logged." in text
    assert "Overall Session Notes: None" in text
