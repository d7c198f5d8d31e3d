from fastapi import APIRouter, Depends

from journey_ai.api.models.schemas import SettingsResponse, UpdateSettingsRequest
from journey_ai.dependencies import get_settings_service
from journey_ai.domain.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
async def read_settings(svc: SettingsService = Depends(get_settings_service)):
    return svc.get_settings()


@router.put("", response_model=SettingsResponse)
async def update_settings(body: UpdateSettingsRequest, svc: SettingsService = Depends(get_settings_service)):
    return svc.update_settings(body)
