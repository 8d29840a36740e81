from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id
from app.database.supabase_client import get_supabase
from app.modules.houses.service import HouseService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Current user plus the houses they have joined."""
    houses = HouseService(supabase).list_user_houses(current_user["id"])
    return {**current_user, "houses": houses}
