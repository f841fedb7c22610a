"""
Domain errors.

Stores and services raise these; the HTTP layer maps them to responses
via the handlers registered in main.py. Routes stay thin.
"""
from __future__ import annotations

from typing import Any

STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409


class PassSyncError(Exception):
    status_code: int = STATUS_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_response(self) -> dict[str, Any]:
        return {"detail": self.detail}


class NotFoundError(PassSyncError):
    """Referenced entity (slot, notification, candidate) does not exist."""

    status_code = STATUS_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(PassSyncError):
    """Illegal transition, e.g. marking a notification read before delivery."""

    status_code = STATUS_CONFLICT


class ValidationFailedError(PassSyncError):
    """Malformed input. `details` names the failing fields."""

    status_code = STATUS_BAD_REQUEST

    def __init__(self, detail: str, details: list[dict[str, Any]] | None = None):
        super().__init__(detail)
        self.details = details or []

    def to_response(self) -> dict[str, Any]:
        return {"detail": self.detail, "details": self.details}


class TransportUnavailableError(PassSyncError):
    """
    A connection could not receive a push (closed / not open).

    Raised inside the broadcast fan-out only; never reaches HTTP callers.
    """
