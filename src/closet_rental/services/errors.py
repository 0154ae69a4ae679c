"""Custom service layer errors."""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """Base error for service-layer failures."""


class ValidationError(ServiceError):
    """Raised when a request is rejected before anything is written."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class AvailabilityError(ValidationError):
    """Raised when a check-out asks for more units than are available."""

    def __init__(self, message: str, item_id: int, requested: int, available: int) -> None:
        super().__init__(message, field="lines")
        self.item_id = item_id
        self.requested = requested
        self.available = available


class NotFoundError(ServiceError):
    """Raised when an entity is not found."""
