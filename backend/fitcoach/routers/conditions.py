"""Daily conditions API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from fitcoach.database import get_db
from fitcoach.routers.deps import get_current_user_id
from fitcoach.schemas import (
    DailyConditionCreate,
    DailyConditionResponse,
    DailyConditionUpdate,
)
from fitcoach.services.condition_service import ConditionService

router = APIRouter(prefix="/conditions", tags=["conditions"])


@router.post("/", status_code=201)
def create_condition(
    payload: DailyConditionCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Log today's (or any day's) wellness. One entry per date."""
    condition = ConditionService(db).create(user_id, payload)
    return {
        "message": "Daily condition logged.",
        "condition": DailyConditionResponse.model_validate(condition),
    }


@router.get("/", response_model=List[DailyConditionResponse])
def list_conditions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return ConditionService(db).list(user_id, start=start_date, end=end_date)


@router.get("/{day}", response_model=DailyConditionResponse)
def get_condition(
    day: date,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return ConditionService(db).get_by_date(user_id, day)


@router.put("/{day}")
def update_condition(
    day: date,
    payload: DailyConditionUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    condition = ConditionService(db).update_by_date(user_id, day, payload)
    return {
        "message": "Daily condition updated.",
        "condition": DailyConditionResponse.model_validate(condition),
    }
