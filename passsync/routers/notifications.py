"""
Notification endpoints for the pass holder's inbox.
"""

import asyncio

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.notifications import NotificationCreate, NotificationRead
from ..services.notifications import NotificationService, NotificationStore
from ..services.realtime import BroadcastRouter, get_broadcaster

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(
    db: Session = Depends(get_db),
    broadcaster: BroadcastRouter = Depends(get_broadcaster),
) -> NotificationService:
    return NotificationService(db, broadcaster)


@router.get("/{pass_code}", response_model=list[NotificationRead])
async def list_notifications(
    pass_code: str,
    include_pending: bool = Query(False, alias="includePending"),
    db: Session = Depends(get_db),
):
    """Delivered notifications, newest first. Scheduled ones only on request."""
    return await asyncio.to_thread(
        NotificationStore(db).list_for_code, pass_code, include_pending
    )


@router.get("/{pass_code}/unread", response_model=list[NotificationRead])
async def list_unread_notifications(pass_code: str, db: Session = Depends(get_db)):
    return await asyncio.to_thread(NotificationStore(db).list_unread, pass_code)


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    data: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
):
    return await service.create(data)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
):
    return await service.mark_read(notification_id)
