"""
Slots API endpoints.

Reads go straight to the store; every write goes through SlotSyncService
so the link's subscribers see the change before the response is sent.
"""

import asyncio

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import SlotCreate, SlotRead, SlotSeedRequest, SlotUpdate
from ..services.realtime import BroadcastRouter, get_broadcaster
from ..services.slots import SlotStore, SlotSyncService

router = APIRouter(prefix="/api/slots", tags=["slots"])


def get_slot_service(
    db: Session = Depends(get_db),
    broadcaster: BroadcastRouter = Depends(get_broadcaster),
) -> SlotSyncService:
    return SlotSyncService(db, broadcaster)


@router.get("/link/{link_id}", response_model=list[SlotRead])
async def list_link_slots(link_id: str, db: Session = Depends(get_db)):
    return await asyncio.to_thread(SlotStore(db).list_by_link, link_id)


@router.get("/manager/{manager_code}", response_model=list[SlotRead])
async def list_manager_slots(manager_code: str, db: Session = Depends(get_db)):
    return await asyncio.to_thread(SlotStore(db).list_by_manager, manager_code)


@router.get("/candidate/{candidate_code}", response_model=list[SlotRead])
async def list_candidate_slots(candidate_code: str, db: Session = Depends(get_db)):
    return await asyncio.to_thread(SlotStore(db).list_by_candidate, candidate_code)


@router.get("/{slot_id}", response_model=SlotRead)
async def get_slot(slot_id: int, db: Session = Depends(get_db)):
    return await asyncio.to_thread(SlotStore(db).get, slot_id)


@router.post("", response_model=SlotRead, status_code=status.HTTP_201_CREATED)
async def create_slot(
    data: SlotCreate,
    service: SlotSyncService = Depends(get_slot_service),
):
    return await service.create_slot(data)


@router.patch("/{slot_id}", response_model=SlotRead)
async def update_slot(
    slot_id: int,
    data: SlotUpdate,
    service: SlotSyncService = Depends(get_slot_service),
):
    # only the fields the caller sent; an explicit null clears
    return await service.update_slot(slot_id, data.model_dump(exclude_unset=True))


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slot(
    slot_id: int,
    service: SlotSyncService = Depends(get_slot_service),
):
    await service.delete_slot(slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/link/{link_id}/seed",
    response_model=list[SlotRead],
    status_code=status.HTTP_201_CREATED,
)
async def seed_link_slots(
    link_id: str,
    data: SlotSeedRequest,
    service: SlotSyncService = Depends(get_slot_service),
):
    """Create the default slot set for a link."""
    return await service.seed_defaults(link_id, data.manager_code, data.template, data.date)
