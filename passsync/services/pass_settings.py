"""
Per-pass settings (theme, module toggles, automation toggles).

Reads create defaults on first access. Every write is pushed to the
pass-code's subscribers as settings_update.
"""

import asyncio
import logging
import threading
from typing import Any

from sqlalchemy.orm import Session

from ..models import PassSettings
from ..schemas.pass_settings import PassSettingsRead, PassSettingsUpdate, PassSettingsUpsert
from ..utils.clock import utcnow
from .realtime import BroadcastRouter

logger = logging.getLogger(__name__)


def default_theme(pass_code: str) -> str:
    upper = pass_code.upper()
    if upper.startswith("REQ"):
        return "tech"
    if upper.startswith("ONB"):
        return "dark"
    return "light"


def default_settings(pass_code: str) -> dict[str, Any]:
    return {
        "theme": default_theme(pass_code),
        "module_timeline": True,
        "module_documents": True,
        "module_availability": True,
        "module_interactions": True,
        "automation_reminders": True,
        "automation_docs": True,
        "automation_digest": False,
    }


class PassSettingsStore:

    _lock = threading.Lock()

    def __init__(self, db: Session):
        self.db = db

    def get_or_create(self, pass_code: str) -> PassSettingsRead:
        with self._lock:
            row = self._get_row(pass_code) or self._insert(pass_code, {})
            return PassSettingsRead.model_validate(row)

    def replace(self, pass_code: str, data: PassSettingsUpsert) -> PassSettingsRead:
        values = data.model_dump()
        if values["theme"] is None:
            values["theme"] = default_theme(pass_code)
        return self._write(pass_code, values)

    def patch(self, pass_code: str, data: PassSettingsUpdate) -> PassSettingsRead:
        values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return self._write(pass_code, values)

    def _write(self, pass_code: str, values: dict[str, Any]) -> PassSettingsRead:
        with self._lock:
            row = self._get_row(pass_code)
            if row is None:
                row = self._insert(pass_code, values)
            else:
                for field, value in values.items():
                    setattr(row, field, value)
                row.updated_at = utcnow()
                self.db.commit()
                self.db.refresh(row)
            return PassSettingsRead.model_validate(row)

    def _get_row(self, pass_code: str) -> PassSettings | None:
        return (
            self.db.query(PassSettings)
            .filter(PassSettings.pass_code == pass_code)
            .one_or_none()
        )

    def _insert(self, pass_code: str, values: dict[str, Any]) -> PassSettings:
        row = PassSettings(
            pass_code=pass_code,
            updated_at=utcnow(),
            **{**default_settings(pass_code), **values},
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Pass settings created for {pass_code}")
        return row


class PassSettingsService:

    def __init__(self, db: Session, broadcaster: BroadcastRouter):
        self.store = PassSettingsStore(db)
        self.broadcaster = broadcaster

    async def get(self, pass_code: str) -> PassSettingsRead:
        return await asyncio.to_thread(self.store.get_or_create, pass_code)

    async def replace(self, pass_code: str, data: PassSettingsUpsert) -> PassSettingsRead:
        settings = await asyncio.to_thread(self.store.replace, pass_code, data)
        await self.broadcaster.publish_settings(pass_code, settings)
        return settings

    async def patch(self, pass_code: str, data: PassSettingsUpdate) -> PassSettingsRead:
        settings = await asyncio.to_thread(self.store.patch, pass_code, data)
        await self.broadcaster.publish_settings(pass_code, settings)
        return settings
