from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.weather.schemas import ResortWeatherResponse
from app.modules.weather.service import WeatherService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_service(supabase: Client = Depends(get_supabase)) -> WeatherService:
    return WeatherService(supabase)


@router.get("/resorts/{resort_id}", response_model=ResortWeatherResponse)
async def get_resort_weather(
    resort_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: WeatherService = Depends(get_weather_service)
):
    """Current conditions, 7 day forecast and snowfall summary for a resort"""
    return service.get_resort_weather(resort_id)
