from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from app.database.supabase_client import get_supabase
from app.modules.signup_windows.schemas import (
    SignupWindowCreate, SignupWindowResponse, SignupWindowStatus
)
from app.modules.signup_windows.service import SignupWindowService
from app.modules.push.expo_client import ExpoPushClient, get_push_client
from app.core.dependencies import check_house_admin, check_house_member, require_cron_secret
from supabase import Client
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["signup_windows"])


def get_signup_window_service(
    supabase: Client = Depends(get_supabase),
    push_client: ExpoPushClient = Depends(get_push_client)
) -> SignupWindowService:
    return SignupWindowService(supabase, push_client)


def _multi_status(result) -> JSONResponse:
    """200 when every house succeeded, 207 when some failed."""
    return JSONResponse(
        status_code=207 if result.errors else 200,
        content=result.model_dump(mode="json", exclude_none=True),
    )


@router.post("/signup-windows/schedule", dependencies=[Depends(require_cron_secret)])
async def schedule_weekly_windows(service: SignupWindowService = Depends(get_signup_window_service)):
    """Cron: create windows for the weekend after next"""
    try:
        return _multi_status(service.schedule_weekly_windows())
    except Exception as e:
        logger.error(f"Error in schedule_weekly_windows: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/signup-windows/open-due", dependencies=[Depends(require_cron_secret)])
async def open_due_windows(service: SignupWindowService = Depends(get_signup_window_service)):
    """Cron: open scheduled windows whose time has come and notify members"""
    try:
        return _multi_status(service.open_due_windows())
    except Exception as e:
        logger.error(f"Error in open_due_windows: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/houses/{house_id}/signup-windows/status", response_model=SignupWindowStatus)
async def get_window_status(
    house_id: str,
    user_data: Dict = Depends(check_house_member),
    service: SignupWindowService = Depends(get_signup_window_service)
):
    return service.get_window_status(house_id)


@router.post("/houses/{house_id}/signup-windows", response_model=SignupWindowResponse, status_code=201)
async def create_window(
    house_id: str,
    window_data: SignupWindowCreate,
    user_data: Dict = Depends(check_house_admin),
    service: SignupWindowService = Depends(get_signup_window_service)
):
    """Create a window by hand (admin)"""
    return service.create_window(house_id, window_data)


@router.post("/houses/{house_id}/signup-windows/{window_id}/open", response_model=SignupWindowResponse)
async def open_window(
    house_id: str,
    window_id: str,
    user_data: Dict = Depends(check_house_admin),
    service: SignupWindowService = Depends(get_signup_window_service)
):
    return service.open_window(house_id, window_id)


@router.post("/houses/{house_id}/signup-windows/{window_id}/close", response_model=SignupWindowResponse)
async def close_window(
    house_id: str,
    window_id: str,
    user_data: Dict = Depends(check_house_admin),
    service: SignupWindowService = Depends(get_signup_window_service)
):
    return service.close_window(house_id, window_id)
