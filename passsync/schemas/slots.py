# passsync/schemas/slots.py
"""
Pydantic schemas for interview / availability slots.
"""

from typing import Literal, Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime

SlotStatus = Literal["open", "held", "booked"]


class SlotCreate(CamelModel):
    """Manager-side slot creation. Duplicates (same label/date/time) are allowed."""
    link_id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    date: str = Field(min_length=1)   # free text, e.g. "Dec 05" or "2026-12-05"
    time: str = Field(min_length=1)   # "HH:MM" or "All Day"
    manager_code: str = Field(min_length=1)
    status: SlotStatus = "open"
    candidate_code: Optional[str] = None
    notes: Optional[str] = None


class SlotUpdate(CamelModel):
    """Partial change. Only fields that were sent are applied."""
    label: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    status: Optional[SlotStatus] = None
    candidate_code: Optional[str] = None
    notes: Optional[str] = None


class SlotRead(CamelModel):
    id: int
    link_id: str
    label: str
    date: str
    time: str
    status: SlotStatus
    manager_code: str
    candidate_code: Optional[str] = None
    notes: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SlotSeedRequest(CamelModel):
    """Default slot seeding for a link."""
    manager_code: str = Field(min_length=1)
    template: Literal["interview", "onboarding"] = "interview"
    date: Optional[str] = Field(None, description="Overrides the template date for every slot")
