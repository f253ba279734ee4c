"""Lifecycle statuses and their allowed transitions.

Each entity has a closed set of statuses and a table of the moves it may
make. All status changes go through ``transition`` so an invalid move is
rejected in one place.
"""

import enum
from typing import Dict, FrozenSet, Type, TypeVar

from sqlalchemy import Enum as SAEnum

from fitcoach.errors import ConflictError


class PlanStatus(str, enum.Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    PAUSED = "Paused"
    ARCHIVED = "Archived"


class SessionStatus(str, enum.Enum):
    PLANNED = "Planned"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"


class ExerciseStatus(str, enum.Enum):
    PLANNED = "Planned"
    STARTED = "Started"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"


PLAN_TERMINAL = frozenset({PlanStatus.COMPLETED, PlanStatus.ARCHIVED})
SESSION_TERMINAL = frozenset({SessionStatus.COMPLETED, SessionStatus.SKIPPED})
EXERCISE_TERMINAL = frozenset({ExerciseStatus.COMPLETED, ExerciseStatus.SKIPPED})

# Includes both the cascade moves (Active -> Completed) and the manual ones.
PLAN_TRANSITIONS: Dict[PlanStatus, FrozenSet[PlanStatus]] = {
    PlanStatus.ACTIVE: frozenset({PlanStatus.PAUSED, PlanStatus.COMPLETED, PlanStatus.ARCHIVED}),
    PlanStatus.PAUSED: frozenset({PlanStatus.ACTIVE, PlanStatus.COMPLETED, PlanStatus.ARCHIVED}),
    PlanStatus.COMPLETED: frozenset({PlanStatus.ARCHIVED}),
    PlanStatus.ARCHIVED: frozenset(),
}

SESSION_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PLANNED: frozenset({SessionStatus.COMPLETED, SessionStatus.SKIPPED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.SKIPPED: frozenset(),
}

EXERCISE_TRANSITIONS: Dict[ExerciseStatus, FrozenSet[ExerciseStatus]] = {
    ExerciseStatus.PLANNED: frozenset(
        {ExerciseStatus.STARTED, ExerciseStatus.COMPLETED, ExerciseStatus.SKIPPED}
    ),
    ExerciseStatus.STARTED: frozenset({ExerciseStatus.COMPLETED, ExerciseStatus.SKIPPED}),
    ExerciseStatus.COMPLETED: frozenset(),
    ExerciseStatus.SKIPPED: frozenset(),
}

_TABLES = {
    PlanStatus: PLAN_TRANSITIONS,
    SessionStatus: SESSION_TRANSITIONS,
    ExerciseStatus: EXERCISE_TRANSITIONS,
}

S = TypeVar("S", PlanStatus, SessionStatus, ExerciseStatus)


def can_transition(current: S, target: S) -> bool:
    return target in _TABLES[type(current)][current]


def transition(entity, target: S, label: str = "") -> bool:
    """Move ``entity.status`` to ``target``.

    Returns False when the entity is already in ``target``; raises
    ConflictError when the table does not allow the move.
    """
    current = type(target)(entity.status)
    if current == target:
        return False
    if not can_transition(current, target):
        name = label or type(entity).__name__
        raise ConflictError(
            f"Cannot change {name} {entity.id} from {current.value} to {target.value}."
        )
    entity.status = target
    return True


def status_column_type(enum_cls: Type[enum.Enum]) -> SAEnum:
    """Store the enum by value ("Active"), not by member name."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=20,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )
