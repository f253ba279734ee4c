"""Services package."""

from fitcoach.services.analysis_service import PerformanceAnalyzer
from fitcoach.services.cascade_service import StatusCascadeEngine
from fitcoach.services.llm_service import GeminiPlanAdapter, GeminiProvider, PlanGenerationAdapter
from fitcoach.services.overdue_sweeper import OverdueSweeper
from fitcoach.services.plan_generator_service import PlanGeneratorService

__all__ = [
    "PerformanceAnalyzer",
    "StatusCascadeEngine",
    "GeminiPlanAdapter",
    "GeminiProvider",
    "PlanGenerationAdapter",
    "OverdueSweeper",
    "PlanGeneratorService",
]
