# passsync/services/slots/defaults.py
"""
Default slot templates used when a manager seeds a new link.
"""

from typing import Optional

from ...schemas.slots import SlotCreate

# (label, date, time, status)
DEFAULT_SLOT_TEMPLATES: dict[str, list[tuple[str, str, str, str]]] = {
    "interview": [
        ("Morning", "Dec 05", "09:30", "open"),
        ("Midday", "Dec 05", "12:00", "held"),
        ("Late", "Dec 05", "16:00", "open"),
    ],
    "onboarding": [
        ("ID Badge", "Dec 01", "All Day", "held"),
        ("Device Pickup", "Nov 30", "10:00", "open"),
    ],
}


def build_default_slots(
    link_id: str,
    manager_code: str,
    template: str = "interview",
    date: Optional[str] = None,
) -> list[SlotCreate]:
    """Slot creation specs for a template. `date` overrides every template date."""
    rows = DEFAULT_SLOT_TEMPLATES[template]
    return [
        SlotCreate(
            link_id=link_id,
            label=label,
            date=date or default_date,
            time=time_str,
            status=status,
            manager_code=manager_code,
        )
        for label, default_date, time_str, status in rows
    ]
