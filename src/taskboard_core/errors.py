"""Domain errors raised by the service layer.

Each error carries a stable ``kind`` string that the HTTP layer maps to a
status code. Messages are human readable and safe to return to clients.
"""
from typing import Optional, Sequence


class TaskboardError(Exception):
    """Base class for all domain errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message}


class NotFoundError(TaskboardError):
    """Raised when an entity is missing or outside the caller's scope."""

    kind = "not_found"


class ValidationError(TaskboardError):
    """Raised when input is malformed or references invalid entities."""

    kind = "validation_error"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        invalid_ids: Optional[Sequence] = None,
    ):
        super().__init__(message)
        self.field = field
        self.invalid_ids = [str(i) for i in invalid_ids] if invalid_ids else []

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        if self.invalid_ids:
            data["invalid_ids"] = self.invalid_ids
        return data


class PermissionDeniedError(TaskboardError):
    """Raised when the actor may not perform the requested change."""

    kind = "permission_denied"

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.fields = sorted(fields) if fields else []

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.fields:
            data["fields"] = self.fields
        return data


class ConflictError(TaskboardError):
    """Raised when a write violates a store-level uniqueness constraint."""

    kind = "conflict"


class NotificationDeliveryError(TaskboardError):
    """Raised when durable notification records could not be written."""

    kind = "notification_delivery_failed"

    def __init__(self, message: str, recipient_ids: Sequence):
        super().__init__(message)
        self.recipient_ids = [str(r) for r in recipient_ids]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["recipient_ids"] = self.recipient_ids
        return data
