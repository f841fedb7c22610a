"""
Admin endpoints: bulk onboarding, broadcasts, reminders, announcements.
"""

import asyncio

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..schemas.admin import (
    AdminActionRead,
    AnnounceRequest,
    AnnounceResponse,
    BatchOnboardRequest,
    BatchOnboardResponse,
    BroadcastRequest,
    BroadcastResponse,
    InterviewReminderRequest,
    MilestoneRemindersResponse,
    ScheduleReminderRequest,
)
from ..schemas.notifications import NotificationRead
from ..services.admin_actions import MAX_ACTIONS_LIMIT, AdminService
from ..services.realtime import BroadcastRouter, get_broadcaster

router = APIRouter(prefix="/api/admin", tags=["admin"])


def get_admin_service(
    db: Session = Depends(get_db),
    broadcaster: BroadcastRouter = Depends(get_broadcaster),
) -> AdminService:
    return AdminService(db, broadcaster, lead_minutes=settings.reminder_lead_minutes)


@router.get("/actions", response_model=list[AdminActionRead])
async def list_admin_actions(
    limit: int = Query(50, ge=1, le=MAX_ACTIONS_LIMIT),
    service: AdminService = Depends(get_admin_service),
):
    return await asyncio.to_thread(service.list_actions, limit)


@router.post("/batch-onboard", response_model=BatchOnboardResponse)
async def batch_onboard(
    data: BatchOnboardRequest,
    service: AdminService = Depends(get_admin_service),
):
    action, results = await service.batch_onboard(data.candidate_codes, data.performed_by)
    return BatchOnboardResponse(action=action, results=results)


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast(
    data: BroadcastRequest,
    service: AdminService = Depends(get_admin_service),
):
    action, count = await service.broadcast(
        data.target_codes,
        data.title,
        data.message,
        priority=data.priority,
        performed_by=data.performed_by,
    )
    return BroadcastResponse(action=action, notification_count=count)


@router.post(
    "/schedule-reminder",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_reminder(
    data: ScheduleReminderRequest,
    service: AdminService = Depends(get_admin_service),
):
    return await service.schedule_reminder(
        data.pass_code,
        data.title,
        data.message,
        data.scheduled_for,
        priority=data.priority,
    )


@router.post("/interview-reminder", response_model=NotificationRead | None)
async def interview_reminder(
    data: InterviewReminderRequest,
    service: AdminService = Depends(get_admin_service),
):
    """Returns null when the reminder time has already passed."""
    return await service.interview_reminder(
        data.pass_code,
        data.interview_title,
        data.interview_at,
        data.minutes_before,
    )


@router.post("/milestone-reminders/{candidate_id}", response_model=MilestoneRemindersResponse)
@router.post(
    "/candidates/{candidate_id}/milestone-reminders",
    response_model=MilestoneRemindersResponse,
)
async def milestone_reminders(
    candidate_id: int,
    service: AdminService = Depends(get_admin_service),
):
    code, reminders = await service.milestone_reminders(candidate_id)
    return MilestoneRemindersResponse(
        candidate_code=code,
        reminders_scheduled=len(reminders),
        reminders=reminders,
    )


@router.post("/announce", response_model=AnnounceResponse)
async def announce(
    data: AnnounceRequest,
    service: AdminService = Depends(get_admin_service),
):
    delivered = await service.announce(data.type, data.payload)
    return AnnounceResponse(type=data.type, delivered=delivered)
