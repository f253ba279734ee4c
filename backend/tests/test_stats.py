"""Tests for the per-period stats aggregations."""

from datetime import date, datetime, timedelta

import pytest

from fitcoach.errors import NotFoundError, ValidationError
from fitcoach.models import ExerciseResult, PlanStatus, SessionStatus
from fitcoach.services.stats_service import StatsService, period_start

from conftest import TODAY


def log_set(db, we, user, at, **fields):
    db.add(ExerciseResult(workout_exercise_id=we.id, user_id=user.id, set_number=1, completed_at=at, **fields))
    db.commit()


def test_period_start():
    assert period_start(TODAY, "day") == TODAY
    assert period_start(TODAY, "week") == date(2025, 6, 9)
    assert period_start(date(2025, 6, 9), "week") == date(2025, 6, 9)
    assert period_start(TODAY, "month") == date(2025, 6, 1)
    assert period_start(TODAY, "year") == date(2025, 1, 1)


def test_exercise_performance_by_week(db, make_user, make_plan, make_exercise):
    user = make_user()
    other = make_user()
    plan = make_plan(user, sessions=[(0, [3])])
    we = plan.sessions[0].workout_exercises[0]
    log_set(db, we, user, datetime(2025, 6, 9, 10, 0), reps_completed=10, weight_used=20.0)
    log_set(db, we, user, datetime(2025, 6, 11, 18, 0), reps_completed=8, weight_used=25.0)
    log_set(db, we, user, datetime(2025, 6, 16, 7, 0), duration_completed=30)
    # Someone else's set on the same exercise
    other_plan = make_plan(other, sessions=[(0, [3])])
    log_set(db, other_plan.sessions[0].workout_exercises[0], other, datetime(2025, 6, 10), weight_used=99.0)

    points = StatsService(db).exercise_performance(user.id, we.exercise_id, group_by="week")

    assert [p.period_start for p in points] == [date(2025, 6, 9), date(2025, 6, 16)]
    first, second = points
    assert first.total_sets == 2
    assert first.max_weight == 25.0
    assert first.average_reps == 9.0
    assert first.average_duration is None
    assert second.total_sets == 1
    assert second.max_weight is None
    assert second.average_duration == 30.0


def test_exercise_performance_window_is_inclusive_by_day(db, make_user, make_plan):
    user = make_user()
    plan = make_plan(user, sessions=[(0, [3])])
    we = plan.sessions[0].workout_exercises[0]
    log_set(db, we, user, datetime(2025, 6, 10, 23, 59), reps_completed=5)
    log_set(db, we, user, datetime(2025, 6, 11, 23, 59), reps_completed=6)
    log_set(db, we, user, datetime(2025, 6, 12, 0, 0), reps_completed=7)

    points = StatsService(db).exercise_performance(user.id, we.exercise_id, start=TODAY, end=TODAY)

    assert len(points) == 1
    assert points[0].period_start == TODAY
    assert points[0].average_reps == 6.0


def test_exercise_performance_unknown_exercise(db, make_user):
    user = make_user()

    with pytest.raises(NotFoundError):
        StatsService(db).exercise_performance(user.id, 999)


def test_unknown_grouping_is_rejected(db, make_user):
    user = make_user()

    with pytest.raises(ValidationError):
        StatsService(db).session_stats(user.id, group_by="fortnight")


def test_session_stats_counts_by_status(db, make_user, make_plan):
    user = make_user()
    other = make_user()
    plan = make_plan(user, sessions=[(0, [1]), (1, []), (5, [])])
    make_plan(other, sessions=[(0, [])])
    done, skipped, _ = plan.sessions
    done.status = SessionStatus.COMPLETED
    skipped.status = SessionStatus.SKIPPED
    db.commit()

    points = StatsService(db).session_stats(user.id)

    assert [p.model_dump() for p in points] == [
        {
            "period_start": date(2025, 6, 9),
            "total_sessions": 2,
            "completed_count": 1,
            "skipped_count": 1,
            "planned_count": 0,
        },
        {
            "period_start": date(2025, 6, 16),
            "total_sessions": 1,
            "completed_count": 0,
            "skipped_count": 0,
            "planned_count": 1,
        },
    ]

    planned_only = StatsService(db).session_stats(user.id, status=SessionStatus.PLANNED)
    assert [(p.period_start, p.total_sessions) for p in planned_only] == [(date(2025, 6, 16), 1)]


def test_condition_stats_average_present_values(db, make_user, make_condition):
    user = make_user()
    make_condition(user, date(2025, 6, 9), sleep_hours=7.0, energy_level=3)
    make_condition(user, date(2025, 6, 10), sleep_hours=8.0)
    make_condition(user, date(2025, 6, 20), sleep_hours=6.0, stress_level=2)

    weekly = StatsService(db).condition_stats(user.id, group_by="week")

    assert [p.period_start for p in weekly] == [date(2025, 6, 9), date(2025, 6, 16)]
    assert weekly[0].total_entries == 2
    assert weekly[0].sleep_hours == 7.5
    assert weekly[0].energy_level == 3.0
    assert weekly[0].stress_level is None
    assert weekly[1].stress_level == 2.0

    [monthly] = StatsService(db).condition_stats(user.id, group_by="month")
    assert monthly.period_start == date(2025, 6, 1)
    assert monthly.total_entries == 3
    assert monthly.sleep_hours == 7.0

    assert StatsService(db).condition_stats(user.id, start=date(2025, 7, 1)) == []


def test_plan_completion_counts_every_status(db, make_user, make_plan):
    user = make_user()
    make_plan(user)
    make_plan(user, start=TODAY - timedelta(days=14), status=PlanStatus.COMPLETED)
    make_plan(user, start=TODAY - timedelta(days=30), status=PlanStatus.ARCHIVED)

    service = StatsService(db)

    assert service.plan_completion(user.id) == {"Active": 1, "Completed": 1, "Paused": 0, "Archived": 1}
    assert service.plan_completion(user.id, start=date(2025, 6, 1)) == {
        "Active": 1,
        "Completed": 1,
        "Paused": 0,
        "Archived": 0,
    }
