from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.pass_settings import PassSettingsRead, PassSettingsUpdate, PassSettingsUpsert
from ..services.pass_settings import PassSettingsService
from ..services.realtime import BroadcastRouter, get_broadcaster

router = APIRouter(prefix="/api/settings", tags=["settings"])


def get_settings_service(
    db: Session = Depends(get_db),
    broadcaster: BroadcastRouter = Depends(get_broadcaster),
) -> PassSettingsService:
    return PassSettingsService(db, broadcaster)


@router.get("/{pass_code}", response_model=PassSettingsRead)
async def get_pass_settings(
    pass_code: str,
    service: PassSettingsService = Depends(get_settings_service),
):
    return await service.get(pass_code)


@router.put("/{pass_code}", response_model=PassSettingsRead)
async def replace_pass_settings(
    pass_code: str,
    data: PassSettingsUpsert,
    service: PassSettingsService = Depends(get_settings_service),
):
    return await service.replace(pass_code, data)


@router.patch("/{pass_code}", response_model=PassSettingsRead)
async def update_pass_settings(
    pass_code: str,
    data: PassSettingsUpdate,
    service: PassSettingsService = Depends(get_settings_service),
):
    return await service.patch(pass_code, data)
