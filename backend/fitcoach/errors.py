"""Domain error taxonomy.

Every service raises one of these; the API layer maps ``status_code`` onto
the HTTP response and renders ``{"message": ..., "error": ...}``.
"""

from typing import List, Optional


class FitCoachError(Exception):
    """Base class for errors that carry a user-facing message."""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.detail:
            body["error"] = self.detail
        return body


class NotFoundError(FitCoachError):
    status_code = 404
    default_message = "Resource not found."


class UnauthorizedError(FitCoachError):
    status_code = 401
    default_message = "Not authenticated."


class ForbiddenError(FitCoachError):
    status_code = 403
    default_message = "You do not have permission to access this resource."


class ConflictError(FitCoachError):
    status_code = 400
    default_message = "The request conflicts with the current state."


class ValidationError(FitCoachError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class NoExercisesAvailableError(FitCoachError):
    status_code = 400
    default_message = "No exercises match your training location. Try changing it."


class GenerationFailedError(FitCoachError):
    status_code = 500
    default_message = "Plan generation failed."


class InvalidGeneratedStructureError(FitCoachError):
    status_code = 500
    default_message = "The generated plan has an invalid structure."
