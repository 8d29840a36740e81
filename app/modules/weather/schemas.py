from pydantic import BaseModel
from typing import Optional, List


class CurrentConditions(BaseModel):
    temperature: float
    apparent_temperature: Optional[float] = None
    snowfall: float = 0
    wind_speed: Optional[float] = None
    wind_direction: Optional[str] = None
    wind_gusts: Optional[float] = None
    weather_code: int
    description: str
    cloud_cover: Optional[float] = None
    is_day: bool = True
    snow_depth: float = 0  # inches
    freezing_level: int = 0  # feet
    uv_index: float = 0
    uv_description: str = "Low"


class HourlyForecast(BaseModel):
    time: str
    temperature: Optional[float] = None
    precipitation_probability: Optional[float] = None
    precipitation: float = 0
    snowfall: float = 0
    weather_code: int
    description: str


class DailyForecast(BaseModel):
    date: str
    temperature_max: Optional[float] = None
    temperature_min: Optional[float] = None
    snowfall_sum: float = 0
    weather_code: int
    description: str
    bluebird: bool = False


class WeatherSummary(BaseModel):
    snowfall_7d: float
    snowfall_7d_display: str
    is_snowing: bool
    is_precipitating: bool = False
    is_clear: bool = False
    description: str
    wind_direction: Optional[str] = None


class ResortWeatherResponse(BaseModel):
    resort_id: str
    resort_name: str
    current: CurrentConditions
    hourly: List[HourlyForecast] = []
    daily: List[DailyForecast]
    summary: WeatherSummary
    cached: bool = False
