from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.houses.schemas import HouseFeaturesResponse
from app.modules.houses.service import HouseService
from app.core.dependencies import check_house_member
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/houses", tags=["houses"])


def get_house_service(supabase: Client = Depends(get_supabase)) -> HouseService:
    return HouseService(supabase)


@router.get("/{house_id}/features", response_model=HouseFeaturesResponse)
async def get_house_features(
    house_id: str,
    user_data: Dict = Depends(check_house_member),
    service: HouseService = Depends(get_house_service)
):
    """Resolved feature switches and labels for a house"""
    return service.get_features(house_id)
