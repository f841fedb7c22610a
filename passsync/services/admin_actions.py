"""
Admin bulk operations.

Each operation runs to completion first and only then writes its single,
immutable admin_actions record. No in-progress records.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import AdminActions
from ..schemas.admin import AdminActionRead, BatchOnboardResult
from ..schemas.notifications import NotificationCreate, NotificationRead
from ..utils.clock import utcnow
from .candidates import get_candidate, mark_onboarding
from .notifications import NotificationService, build_interview_reminder, derive_milestone_reminders
from .realtime import BroadcastRouter

logger = logging.getLogger(__name__)

MAX_ACTIONS_LIMIT = 200


class AdminService:

    def __init__(self, db: Session, broadcaster: BroadcastRouter, lead_minutes: int = 30):
        self.db = db
        self.broadcaster = broadcaster
        self.notifications = NotificationService(db, broadcaster)
        self.lead_minutes = lead_minutes

    def list_actions(self, limit: int = 50) -> list[AdminActionRead]:
        rows = (
            self.db.query(AdminActions)
            .order_by(AdminActions.created_at.desc(), AdminActions.id.desc())
            .limit(max(1, min(limit, MAX_ACTIONS_LIMIT)))
            .all()
        )
        return [AdminActionRead.model_validate(r) for r in rows]

    async def batch_onboard(
        self,
        candidate_codes: list[str],
        performed_by: str = "admin",
    ) -> tuple[AdminActionRead, list[BatchOnboardResult]]:
        codes = _unique(candidate_codes)
        results = []

        for code in codes:
            found = await asyncio.to_thread(mark_onboarding, self.db, code)
            if not found:
                results.append(BatchOnboardResult(code=code, status="not_found"))
                continue

            await self.notifications.create(NotificationCreate(
                pass_code=code,
                type="onboarding",
                title="Welcome to Onboarding!",
                message="Your onboarding process has begun. Check your timeline for next steps.",
                priority="high",
            ))
            results.append(BatchOnboardResult(code=code, status="onboarded"))

        action = await asyncio.to_thread(
            self._record,
            "batch_onboard",
            codes,
            performed_by,
            {"results": [r.model_dump() for r in results]},
        )
        await self.broadcaster.publish_admin_action(action, codes)
        return action, results

    async def broadcast(
        self,
        target_codes: list[str],
        title: str,
        message: str,
        priority: str = "normal",
        performed_by: str = "admin",
    ) -> tuple[AdminActionRead, int]:
        """One notification per target code, each pushed as it is created."""
        codes = _unique(target_codes)
        created = []
        for code in codes:
            created.append(await self.notifications.create(NotificationCreate(
                pass_code=code,
                type="broadcast",
                title=title,
                message=message,
                priority=priority,
            )))

        action = await asyncio.to_thread(
            self._record,
            "broadcast",
            codes,
            performed_by,
            {"title": title, "message": message, "notificationCount": len(created)},
        )
        return action, len(created)

    async def schedule_reminder(
        self,
        pass_code: str,
        title: str,
        message: str,
        scheduled_for: datetime,
        priority: str = "normal",
    ) -> NotificationRead:
        return await self.notifications.create(NotificationCreate(
            pass_code=pass_code,
            type="reminder",
            title=title,
            message=message,
            priority=priority,
            scheduled_for=scheduled_for,
        ))

    async def interview_reminder(
        self,
        pass_code: str,
        interview_title: str,
        interview_at: datetime,
        minutes_before: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[NotificationRead]:
        spec = build_interview_reminder(
            pass_code,
            interview_title,
            interview_at,
            now or utcnow(),
            minutes_before or self.lead_minutes,
        )
        if spec is None:
            logger.info(f"Interview reminder for {pass_code} is in the past, skipping")
            return None
        return await self.notifications.create(spec, now)

    async def milestone_reminders(
        self,
        candidate_id: int,
        now: Optional[datetime] = None,
    ) -> tuple[str, list[NotificationRead]]:
        now = now or utcnow()
        code, timeline = await asyncio.to_thread(self._timeline_snapshot, candidate_id)
        specs = derive_milestone_reminders(code, timeline, now, self.lead_minutes)
        reminders = await self.notifications.create_many(specs, now)

        logger.info(f"Scheduled {len(reminders)} milestone reminders for {code}")
        return code, reminders

    async def announce(self, event_type: str, payload: dict[str, Any]) -> int:
        return await self.broadcaster.publish_all(event_type, payload)

    # ── Internals ────────────────────────────────────────────────────────

    def _timeline_snapshot(self, candidate_id: int) -> tuple[str, list[dict[str, Any]]]:
        candidate = get_candidate(self.db, candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        timeline = [
            {"title": t.title, "date": t.date, "status": t.status}
            for t in candidate.timeline
        ]
        return candidate.code, timeline

    def _record(
        self,
        action_type: str,
        target_codes: list[str],
        performed_by: str,
        payload: dict[str, Any],
    ) -> AdminActionRead:
        row = AdminActions(
            action_type=action_type,
            target_codes=target_codes,
            performed_by=performed_by or "admin",
            payload=payload,
            status="completed",
            created_at=utcnow(),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Admin action recorded: {action_type} id={row.id} targets={len(target_codes)}")
        return AdminActionRead.model_validate(row)


def _unique(codes: list[str]) -> list[str]:
    """Drop blanks and repeats, keep order."""
    return list(dict.fromkeys(c for c in codes if c))
