"""
API error types for Ignition.

Blueprints raise these; the handlers registered in ignition.app turn them into
JSON responses.
"""

from typing import Dict, Optional


class ApiError(Exception):
    """An error answered with a status code and a human-readable message."""

    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> Dict[str, object]:
        return {"message": self.message}


class ValidationError(ApiError):
    """A request field failed validation.

    Answered with HTTP 400 and a {"errors": {field: message}} body.
    """

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_response(self) -> Dict[str, object]:
        return {"errors": {self.field: self.message}}


class Unauthenticated(ApiError):
    status_code = 401

    def __init__(self, message: str = "Unauthenticated"):
        super().__init__(message)


class PermissionDenied(ApiError):
    status_code = 403

    def __init__(self, message: str = "You don't have permissions to do that."):
        super().__init__(message)
