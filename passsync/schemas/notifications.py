from typing import Literal, Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime

Priority = Literal["normal", "high"]


class NotificationCreate(CamelModel):
    pass_code: str = Field(min_length=1)
    type: str = Field(min_length=1)  # reminder / broadcast / onboarding / milestone_reminder / ...
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    priority: Priority = "normal"
    scheduled_for: Optional[UtcDatetime] = None


class NotificationRead(CamelModel):
    id: int
    pass_code: str
    type: str
    title: str
    message: str
    priority: Priority
    read: bool
    delivered: bool
    scheduled_for: Optional[UtcDatetime] = None
    delivered_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime
