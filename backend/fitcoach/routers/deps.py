"""Shared router dependencies."""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from fitcoach.errors import UnauthorizedError
from fitcoach.services.auth_service import AuthService
from fitcoach.services.llm_service import GeminiPlanAdapter, PlanGenerationAdapter

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_user_id(token: Optional[str] = Depends(oauth2_scheme)) -> int:
    """User id from the bearer token; the token is issued by the auth service."""
    if not token:
        raise UnauthorizedError()
    user_id = AuthService.user_id_from_token(token)
    if user_id is None:
        raise UnauthorizedError("Invalid or expired token.")
    return user_id


def get_plan_adapter() -> PlanGenerationAdapter:
    return GeminiPlanAdapter()
