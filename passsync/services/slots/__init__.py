# passsync/services/slots/__init__.py
"""
Slot module.

Store: persistence + booking transitions (no broadcasting)
Sync: store mutation → slot_update fan-out keyed by link id
"""

from .defaults import DEFAULT_SLOT_TEMPLATES, build_default_slots
from .store import SlotStore
from .sync import SlotSyncService
from .transitions import BOOKED, HELD, OPEN

__all__ = [
    "BOOKED",
    "HELD",
    "OPEN",
    "DEFAULT_SLOT_TEMPLATES",
    "build_default_slots",
    "SlotStore",
    "SlotSyncService",
]
