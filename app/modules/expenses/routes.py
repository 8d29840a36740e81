from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.expenses.schemas import (
    ExpenseBalanceData, SplitPreviewRequest, SplitPreviewResponse,
    SettleAllRequest, SettleAllResponse, GuestFeeRequest, GuestFeeResponse
)
from app.modules.expenses.service import ExpenseService
from app.modules.notifications.service import NotificationService
from app.modules.push.expo_client import ExpoPushClient, get_push_client
from app.core.dependencies import check_house_member
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/houses/{house_id}/expenses", tags=["expenses"])


def get_expense_service(
    supabase: Client = Depends(get_supabase),
    push_client: ExpoPushClient = Depends(get_push_client)
) -> ExpenseService:
    return ExpenseService(supabase, NotificationService(supabase, push_client))


@router.get("/balances", response_model=ExpenseBalanceData)
async def get_balances(
    house_id: str,
    user_data: Dict = Depends(check_house_member),
    service: ExpenseService = Depends(get_expense_service)
):
    """Per-member balances and totals for the current user"""
    return service.get_user_balances(house_id, user_data["id"])


@router.post("/split-preview", response_model=SplitPreviewResponse)
async def preview_split(
    house_id: str,
    request: SplitPreviewRequest,
    user_data: Dict = Depends(check_house_member),
    service: ExpenseService = Depends(get_expense_service)
):
    """Even split of an amount, or validation of a custom split"""
    return service.preview_split(request)


@router.post("/settle-all", response_model=SettleAllResponse)
async def settle_all(
    house_id: str,
    request: SettleAllRequest,
    user_data: Dict = Depends(check_house_member),
    service: ExpenseService = Depends(get_expense_service)
):
    """Mark everything another member owes the current user as settled"""
    if request.other_user_id == user_data["id"]:
        raise HTTPException(status_code=400, detail="Cannot settle with yourself")
    return service.settle_all_with_user(house_id, user_data["id"], request.other_user_id)


@router.post("/guest-fees", response_model=GuestFeeResponse, status_code=201)
async def create_guest_fee(
    house_id: str,
    request: GuestFeeRequest,
    user_data: Dict = Depends(check_house_member),
    service: ExpenseService = Depends(get_expense_service)
):
    """Charge the current user for guests on a stay"""
    return service.create_guest_fee(house_id, user_data["id"], request)
