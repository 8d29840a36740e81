import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.push.expo_client import ExpoPushClient
from app.modules.signup_windows.service import SignupWindowService

logger = logging.getLogger(__name__)

_last_scheduled_on: Optional[date] = None


def run_signup_jobs(now: Optional[datetime] = None):
    """Open due windows; on the scheduling weekday also create next windows (once per day)."""
    global _last_scheduled_on
    service = SignupWindowService(get_supabase(), ExpoPushClient())
    now = now or datetime.now(service.schedule_tz())

    opened = service.open_due_windows(now)
    if opened.windows_opened:
        logger.info(f"Opened {opened.windows_opened} signup window(s)")

    if now.weekday() == settings.signup_schedule_weekday and _last_scheduled_on != now.date():
        service.schedule_weekly_windows(now)
        _last_scheduled_on = now.date()


async def signup_scheduler_loop():
    """Background task that periodically opens due windows and schedules new ones"""
    while True:
        try:
            await asyncio.to_thread(run_signup_jobs)
        except Exception as e:
            logger.error(f"Error in signup scheduler loop: {str(e)}")

        await asyncio.sleep(settings.signup_scheduler_interval_seconds)
