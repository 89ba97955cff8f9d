"""Service-layer errors. Each kind maps to one HTTP status; main.py renders them as {"detail": ...}."""
from fastapi import status


class ServiceError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransition(ValidationFailed):
    """Booking status change not allowed for this role or from the current state."""


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
