"""Daily condition logging."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from fitcoach.database import transaction
from fitcoach.errors import NotFoundError
from fitcoach.models import DailyCondition
from fitcoach.schemas import DailyConditionCreate, DailyConditionUpdate
from fitcoach.services.cascade_service import coerce_input

logger = logging.getLogger(__name__)


class ConditionService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, data) -> DailyCondition:
        """Log the condition for a date; a second entry for the same date is a conflict."""
        data = coerce_input(DailyConditionCreate, data)
        condition = DailyCondition(user_id=user_id, **data.model_dump())
        with transaction(
            self.db,
            conflict_message=f"A daily condition for {data.date.isoformat()} already exists. Update it instead.",
        ):
            self.db.add(condition)
        self.db.refresh(condition)
        return condition

    def list(self, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[DailyCondition]:
        query = self.db.query(DailyCondition).filter(DailyCondition.user_id == user_id)
        if start is not None:
            query = query.filter(DailyCondition.date >= start)
        if end is not None:
            query = query.filter(DailyCondition.date <= end)
        return query.order_by(DailyCondition.date.desc()).all()

    def get_by_date(self, user_id: int, day: date) -> DailyCondition:
        condition = (
            self.db.query(DailyCondition)
            .filter(DailyCondition.user_id == user_id, DailyCondition.date == day)
            .first()
        )
        if not condition:
            raise NotFoundError(f"No daily condition found for {day.isoformat()}.")
        return condition

    def update_by_date(self, user_id: int, day: date, data) -> DailyCondition:
        data = coerce_input(DailyConditionUpdate, data)
        with transaction(self.db):
            condition = self.get_by_date(user_id, day)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(condition, field, value)
        self.db.refresh(condition)
        logger.info(f"Daily condition {day} updated for user {user_id}.")
        return condition
