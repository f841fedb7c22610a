# passsync/schemas/admin.py
"""
Admin bulk operations: batch onboarding, broadcasts, reminders.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime
from .notifications import NotificationRead, Priority


class AdminActionRead(CamelModel):
    id: int
    action_type: str
    target_codes: list[str]
    performed_by: str
    payload: Optional[dict[str, Any]] = None
    status: str
    created_at: UtcDatetime


class BatchOnboardRequest(CamelModel):
    candidate_codes: list[str] = Field(min_length=1)
    performed_by: str = "admin"


class BatchOnboardResult(CamelModel):
    code: str
    status: str  # onboarded / not_found


class BatchOnboardResponse(CamelModel):
    action: AdminActionRead
    results: list[BatchOnboardResult]


class BroadcastRequest(CamelModel):
    target_codes: list[str] = Field(min_length=1)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    priority: Priority = "normal"
    performed_by: str = "admin"


class BroadcastResponse(CamelModel):
    action: AdminActionRead
    notification_count: int


class ScheduleReminderRequest(CamelModel):
    pass_code: str = Field(min_length=1)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    scheduled_for: UtcDatetime
    priority: Priority = "normal"


class InterviewReminderRequest(CamelModel):
    pass_code: str = Field(min_length=1)
    interview_title: str = Field(min_length=1)
    interview_at: datetime
    minutes_before: Optional[int] = Field(None, ge=1)


class MilestoneRemindersResponse(CamelModel):
    candidate_code: str
    reminders_scheduled: int
    reminders: list[NotificationRead]


class AnnounceRequest(CamelModel):
    type: str = Field("announcement", min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)


class AnnounceResponse(CamelModel):
    type: str
    delivered: int
