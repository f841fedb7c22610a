from .reminders import build_interview_reminder, derive_milestone_reminders
from .service import NotificationService
from .store import NotificationStore, is_due

__all__ = [
    "NotificationService",
    "NotificationStore",
    "build_interview_reminder",
    "derive_milestone_reminders",
    "is_due",
]
