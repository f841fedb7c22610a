from typing import Literal, Optional

from .common import CamelModel, UtcDatetime

Theme = Literal["light", "dark", "tech"]


class PassSettingsUpsert(CamelModel):
    """Full replacement (PUT). Missing fields fall back to defaults."""
    theme: Optional[Theme] = None  # None → derived from the pass-code prefix
    module_timeline: bool = True
    module_documents: bool = True
    module_availability: bool = True
    module_interactions: bool = True
    automation_reminders: bool = True
    automation_docs: bool = True
    automation_digest: bool = False


class PassSettingsUpdate(CamelModel):
    theme: Optional[Theme] = None
    module_timeline: Optional[bool] = None
    module_documents: Optional[bool] = None
    module_availability: Optional[bool] = None
    module_interactions: Optional[bool] = None
    automation_reminders: Optional[bool] = None
    automation_docs: Optional[bool] = None
    automation_digest: Optional[bool] = None


class PassSettingsRead(CamelModel):
    pass_code: str
    theme: Theme
    module_timeline: bool
    module_documents: bool
    module_availability: bool
    module_interactions: bool
    automation_reminders: bool
    automation_docs: bool
    automation_digest: bool
    updated_at: UtcDatetime
