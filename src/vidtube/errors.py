"""Error taxonomy surfaced to HTTP clients.

Every failure is translated exactly once into one of these and rendered by the
handlers registered in ``main.py`` as ``{statusCode, data, message, success,
errors}``.
"""
from typing import Any, List, Optional


class ApiError(Exception):
    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {
            "statusCode": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


class ValidationError(ApiError):
    status_code = 400
    default_message = "All fields are required"


class AuthError(ApiError):
    status_code = 401
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource does not exist"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Resource already exists"


class DependencyError(ApiError):
    status_code = 500
    default_message = "Something went wrong while talking to a dependency"
