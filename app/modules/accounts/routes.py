from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.accounts.service import AccountService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/account", tags=["account"])


def get_account_service(supabase: Client = Depends(get_supabase)) -> AccountService:
    return AccountService(supabase)


@router.delete("", status_code=200)
async def delete_account(
    user_data: Dict = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service)
):
    """Permanently delete the calling user's account and uploaded files"""
    files_removed = service.delete_account(user_data["id"])
    return {"success": True, "files_removed": files_removed}
