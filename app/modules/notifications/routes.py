from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.notifications.schemas import (
    NotificationRequest, AdminPingRequest, ChatNotificationRequest,
    EventNotificationRequest, SettlementNotificationRequest, NotificationResult,
    PingTemplateResponse
)
from app.modules.notifications.service import NotificationService
from app.modules.notifications.templates import ADMIN_PING_TEMPLATES
from app.modules.push.expo_client import ExpoPushClient, get_push_client
from app.core.dependencies import get_current_user_id, get_membership
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(
    supabase: Client = Depends(get_supabase),
    push_client: ExpoPushClient = Depends(get_push_client)
) -> NotificationService:
    return NotificationService(supabase, push_client)


def _require_member(house_id: str, user_id: str, supabase: Client):
    if not get_membership(house_id, user_id, supabase):
        raise HTTPException(status_code=403, detail="You must be a member of this house")


@router.post("/send", response_model=NotificationResult)
async def send_notification(
    request: NotificationRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
    supabase: Client = Depends(get_supabase)
):
    """Notify a single user or every accepted member of a house"""
    if request.house_id:
        _require_member(request.house_id, user_data["id"], supabase)
    return service.send_notification(request)


@router.post("/admin-ping", response_model=NotificationResult)
async def send_admin_ping(
    request: AdminPingRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Admin broadcast to the rest of the house (sender must be a house admin)"""
    return service.send_admin_ping(user_data["id"], request)


@router.get("/admin-ping/templates", response_model=List[PingTemplateResponse])
async def list_ping_templates(user_data: Dict = Depends(get_current_user_id)):
    return [PingTemplateResponse(id=ping_type, **template) for ping_type, template in ADMIN_PING_TEMPLATES.items()]


@router.post("/chat", response_model=NotificationResult)
async def send_chat_notification(
    request: ChatNotificationRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Push a new chat message to house members or the DM recipient"""
    if request.sender_id != user_data["id"]:
        raise HTTPException(status_code=403, detail="Cannot send notifications on behalf of another user")
    return service.send_chat_notification(request)


@router.post("/event", response_model=NotificationResult)
async def send_event_notification(
    request: EventNotificationRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Tell participants they were added to an event"""
    return service.send_event_notification(request)


@router.post("/settlement", response_model=NotificationResult)
async def send_settlement_notification(
    request: SettlementNotificationRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Tell a member that expenses they were owed were marked settled"""
    return service.send_settlement_notification(request)
