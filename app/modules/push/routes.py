from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.push.schemas import PushTokenRegister, PushTokenResponse
from app.modules.push.service import PushTokenService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/push-tokens", tags=["push"])


def get_push_token_service(supabase: Client = Depends(get_supabase)) -> PushTokenService:
    return PushTokenService(supabase)


@router.post("", response_model=PushTokenResponse, status_code=201)
async def register_push_token(
    token_data: PushTokenRegister,
    user_data: Dict = Depends(get_current_user_id),
    service: PushTokenService = Depends(get_push_token_service)
):
    """Register the calling device for push notifications"""
    return service.register_token(user_data["id"], token_data)


@router.delete("/{token}", status_code=204)
async def remove_push_token(
    token: str,
    user_data: Dict = Depends(get_current_user_id),
    service: PushTokenService = Depends(get_push_token_service)
):
    """Unregister a device token (e.g. on sign-out)"""
    if not service.remove_token(user_data["id"], token):
        raise HTTPException(status_code=404, detail="Push token not found")
    return None
