"""Training plans API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from fitcoach.database import get_db
from fitcoach.routers.deps import get_current_user_id, get_plan_adapter
from fitcoach.schemas import (
    PerformanceSummary,
    PlanStatusUpdate,
    TrainingPlanDetail,
    TrainingPlanResponse,
)
from fitcoach.services.cascade_service import StatusCascadeEngine
from fitcoach.services.llm_service import PlanGenerationAdapter
from fitcoach.services.plan_generator_service import PlanGeneratorService
from fitcoach.services.plan_service import PlanService

router = APIRouter(prefix="/plans", tags=["plans"])


@router.post("/generate", status_code=201)
async def generate_plan(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    adapter: PlanGenerationAdapter = Depends(get_plan_adapter),
):
    """Generate next week's plan from the profile and the last finished plan."""
    service = PlanGeneratorService(db, adapter=adapter)
    plan = await service.generate_plan(user_id)
    plan = PlanService(db).get_plan(plan.id, user_id)
    return {
        "message": "Training plan generated successfully.",
        "plan": TrainingPlanDetail.model_validate(plan),
    }


@router.get("/", response_model=List[TrainingPlanResponse])
def list_plans(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """List the user's plans, newest first."""
    return PlanService(db).list_plans(user_id)


@router.get("/{plan_id}", response_model=TrainingPlanDetail)
def get_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get a plan with its sessions, exercises and results."""
    return PlanService(db).get_plan(plan_id, user_id)


@router.put("/{plan_id}/status")
def update_plan_status(
    plan_id: int,
    payload: PlanStatusUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    plan = StatusCascadeEngine(db).set_plan_status(plan_id, user_id, payload.status)
    return {
        "message": f"Plan status updated to {plan.status.value}.",
        "plan": TrainingPlanResponse.model_validate(plan),
    }


@router.get("/{plan_id}/analysis", response_model=PerformanceSummary)
def get_plan_analysis(
    plan_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Planned vs. actual performance and condition averages for one plan."""
    return PlanService(db).analyze_plan(plan_id, user_id)
