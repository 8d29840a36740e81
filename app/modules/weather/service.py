import time
import requests
from supabase import Client
from app.config import settings
from app.modules.weather.schemas import (
    CurrentConditions, HourlyForecast, DailyForecast, WeatherSummary, ResortWeatherResponse
)
from app.modules.weather.utils import (
    get_weather_description, is_snow_weather, is_precipitation_weather, is_clear_weather,
    get_wind_direction, get_uv_description,
    is_bluebird_day, calculate_total_snowfall, format_snowfall
)
from typing import Dict, Any, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Per-process forecast cache: resort_id -> (payload, expiry)
_WEATHER_CACHE: Dict[str, tuple] = {}
_WEATHER_CACHE_MAX_SIZE = 200

CURRENT_FIELDS = [
    "temperature_2m", "apparent_temperature", "precipitation", "snowfall",
    "wind_speed_10m", "wind_direction_10m", "wind_gusts_10m", "weather_code",
    "cloud_cover", "is_day", "snow_depth", "freezing_level_height", "uv_index",
]
HOURLY_FIELDS = ["temperature_2m", "precipitation_probability", "precipitation", "snowfall", "weather_code"]
DAILY_FIELDS = [
    "temperature_2m_max", "temperature_2m_min", "precipitation_sum", "snowfall_sum",
    "precipitation_probability_max", "weather_code", "sunshine_duration",
    "cloud_cover_mean", "uv_index_max",
]
METERS_TO_INCHES = 39.37
METERS_TO_FEET = 3.281
FEET_TO_METERS = 0.3048
HOURLY_WINDOW = 24


def _store(resort_id: str, report: ResortWeatherResponse, now: float):
    """Cache a report, dropping expired entries and then the oldest one when full."""
    if len(_WEATHER_CACHE) >= _WEATHER_CACHE_MAX_SIZE:
        for key in [k for k, (_, expiry) in _WEATHER_CACHE.items() if expiry <= now]:
            del _WEATHER_CACHE[key]
    if len(_WEATHER_CACHE) >= _WEATHER_CACHE_MAX_SIZE:
        oldest = min(_WEATHER_CACHE, key=lambda k: _WEATHER_CACHE[k][1])
        del _WEATHER_CACHE[oldest]
    _WEATHER_CACHE[resort_id] = (report, now + settings.weather_cache_ttl_seconds)


class WeatherService:
    def __init__(self, supabase: Client, session: Optional[requests.Session] = None):
        self.supabase = supabase
        self.session = session or requests.Session()

    def get_resort(self, resort_id: str) -> Dict[str, Any]:
        result = self.supabase.table("resorts")\
            .select("id, name, latitude, longitude, elevation")\
            .eq("id", resort_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Resort not found")
        return result.data

    def fetch_forecast(self, latitude: float, longitude: float, elevation: Optional[float] = None) -> Dict[str, Any]:
        """Raw Open-Meteo forecast in imperial units (elevation given in feet)."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
            "timezone": "auto",
            "forecast_days": 7,
            "forecast_hours": HOURLY_WINDOW,
        }
        if elevation:
            params["elevation"] = round(elevation * FEET_TO_METERS)
        response = self.session.get(settings.open_meteo_url, params=params, timeout=10)
        if not response.ok:
            raise HTTPException(status_code=502, detail=f"Weather API error: {response.status_code}")
        return response.json()

    @staticmethod
    def build_report(resort: Dict[str, Any], data: Dict[str, Any]) -> ResortWeatherResponse:
        current = data["current"]
        daily = data["daily"]
        code = current["weather_code"]
        uv_index = current.get("uv_index") or 0
        wind_direction = current.get("wind_direction_10m")

        conditions = CurrentConditions(
            temperature=current["temperature_2m"],
            apparent_temperature=current.get("apparent_temperature"),
            snowfall=current.get("snowfall") or 0,
            wind_speed=current.get("wind_speed_10m"),
            wind_direction=get_wind_direction(wind_direction) if wind_direction is not None else None,
            wind_gusts=current.get("wind_gusts_10m"),
            weather_code=code,
            description=get_weather_description(code),
            cloud_cover=current.get("cloud_cover"),
            is_day=current.get("is_day") == 1,
            snow_depth=round((current.get("snow_depth") or 0) * METERS_TO_INCHES, 1),
            freezing_level=round((current.get("freezing_level_height") or 0) * METERS_TO_FEET),
            uv_index=uv_index,
            uv_description=get_uv_description(uv_index),
        )

        hourly = data.get("hourly") or {}
        hours = []
        for i, hour in enumerate((hourly.get("time") or [])[:HOURLY_WINDOW]):
            hour_code = hourly["weather_code"][i]
            hours.append(HourlyForecast(
                time=hour,
                temperature=hourly["temperature_2m"][i],
                precipitation_probability=hourly["precipitation_probability"][i],
                precipitation=hourly["precipitation"][i] or 0,
                snowfall=hourly["snowfall"][i] or 0,
                weather_code=hour_code,
                description=get_weather_description(hour_code),
            ))

        days = []
        for i, day in enumerate(daily.get("time") or []):
            day_code = daily["weather_code"][i]
            sunshine = (daily.get("sunshine_duration") or [None] * (i + 1))[i]
            cloud = (daily.get("cloud_cover_mean") or [None] * (i + 1))[i]
            days.append(DailyForecast(
                date=day,
                temperature_max=daily["temperature_2m_max"][i],
                temperature_min=daily["temperature_2m_min"][i],
                snowfall_sum=daily["snowfall_sum"][i] or 0,
                weather_code=day_code,
                description=get_weather_description(day_code),
                bluebird=sunshine is not None and cloud is not None and is_bluebird_day(sunshine, cloud),
            ))

        snowfall_7d = round(calculate_total_snowfall(daily.get("snowfall_sum") or [], 7), 1)
        return ResortWeatherResponse(
            resort_id=resort["id"],
            resort_name=resort["name"],
            current=conditions,
            hourly=hours,
            daily=days,
            summary=WeatherSummary(
                snowfall_7d=snowfall_7d,
                snowfall_7d_display=format_snowfall(snowfall_7d),
                is_snowing=is_snow_weather(code),
                is_precipitating=is_precipitation_weather(code),
                is_clear=is_clear_weather(code),
                description=get_weather_description(code),
                wind_direction=conditions.wind_direction,
            ),
        )

    def get_resort_weather(self, resort_id: str) -> ResortWeatherResponse:
        """Forecast for a resort, served from cache for weather_cache_ttl_seconds."""
        now = time.monotonic()
        if resort_id in _WEATHER_CACHE:
            report, expiry = _WEATHER_CACHE[resort_id]
            if now < expiry:
                return report.model_copy(update={"cached": True})
            del _WEATHER_CACHE[resort_id]

        resort = self.get_resort(resort_id)
        try:
            data = self.fetch_forecast(resort["latitude"], resort["longitude"], resort.get("elevation"))
            report = self.build_report(resort, data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching weather for resort {resort_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to fetch weather")

        _store(resort_id, report, now)
        return report

    @staticmethod
    def clear_cache(resort_id: Optional[str] = None):
        if resort_id:
            _WEATHER_CACHE.pop(resort_id, None)
        else:
            _WEATHER_CACHE.clear()
