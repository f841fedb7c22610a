from .tables import (
    AdminActions,
    Base,
    Candidates,
    InterviewSlots,
    Notifications,
    PassSettings,
    TimelineEntries,
)

__all__ = [
    "AdminActions",
    "Base",
    "Candidates",
    "InterviewSlots",
    "Notifications",
    "PassSettings",
    "TimelineEntries",
]
