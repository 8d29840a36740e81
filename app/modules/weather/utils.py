"""
Helpers for Open-Meteo forecasts: WMO weather codes, wind and UV labels,
bluebird-day detection and snowfall totals.
"""

from typing import Iterable, Optional

WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

SNOW_CODES = {71, 73, 75, 77, 85, 86}
COMPASS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
FULL_SUN_SECONDS = 8 * 3600


def get_weather_description(code: int) -> str:
    return WEATHER_CODES.get(code, "Unknown")


def is_snow_weather(code: int) -> bool:
    return code in SNOW_CODES


def is_precipitation_weather(code: int) -> bool:
    return code >= 51


def is_clear_weather(code: int) -> bool:
    return code <= 1


def get_wind_direction(degrees: float) -> str:
    # halves round up
    return COMPASS[int(degrees / 45 + 0.5) % 8]


def get_uv_description(uv_index: float) -> str:
    if uv_index <= 2:
        return "Low"
    if uv_index <= 5:
        return "Moderate"
    if uv_index <= 7:
        return "High"
    if uv_index <= 10:
        return "Very High"
    return "Extreme"


def is_bluebird_day(sunshine_duration: float, cloud_cover: float) -> bool:
    """More than 60% of an 8 hour sunny day and under 25% cloud cover."""
    sunshine_percent = sunshine_duration / FULL_SUN_SECONDS * 100
    return sunshine_percent > 60 and cloud_cover < 25


def calculate_total_snowfall(snowfall: Iterable[Optional[float]], days: int = 7) -> float:
    return sum((value or 0) for value in list(snowfall)[:days])


def format_snowfall(inches: float) -> str:
    if inches == 0:
        return '0"'
    if inches < 0.1:
        return '<0.1"'
    return f'{inches:.1f}"'
