"""
Date arithmetic for weekly bed sign-up windows.

Windows target the weekend after next (Friday to Sunday) and open at a
random time on the Monday or Tuesday before, between 08:00 and 19:59.
"""

import random
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple

OPEN_HOUR_START = 8
OPEN_HOUR_SPAN = 12


def _sunday_based_weekday(d: date) -> int:
    """0 = Sunday ... 6 = Saturday"""
    return (d.weekday() + 1) % 7


def get_target_weekend(today: date) -> Tuple[date, date, date]:
    """Return (friday, sunday, monday).

    friday is 8-14 days away (a Friday maps to the Friday two weeks out),
    sunday closes that weekend, and monday is the day the window opens:
    tomorrow on a Sunday, today on a Monday, otherwise the coming Monday.
    """
    if isinstance(today, datetime):
        today = today.date()
    dow = _sunday_based_weekday(today)

    days_until_friday = (5 - dow + 7) % 7
    if days_until_friday == 0:
        days_until_friday = 7
    days_until_friday += 7

    friday = today + timedelta(days=days_until_friday)
    sunday = friday + timedelta(days=2)
    monday = today + timedelta(days=(1 - dow + 7) % 7)
    return friday, sunday, monday


def random_open_time(monday: date, tz: Optional[tzinfo] = None, rng: Optional[random.Random] = None) -> datetime:
    """Random minute on Monday or Tuesday between 08:00 and 19:59 in tz."""
    rng = rng or random.Random()
    day_offset = 0 if rng.random() < 0.5 else 1
    hour = OPEN_HOUR_START + rng.randrange(OPEN_HOUR_SPAN)
    minute = rng.randrange(60)
    return datetime.combine(monday + timedelta(days=day_offset), time(hour, minute), tzinfo=tz)


def house_wants_windows(settings: Optional[dict]) -> bool:
    settings = settings or {}
    return settings.get("bedSignupEnabled") is True and settings.get("autoScheduleWindows") is not False
