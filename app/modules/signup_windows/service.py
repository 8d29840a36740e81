from supabase import Client
from app.config import settings
from app.core.dates import format_local_date, format_weekend_range
from app.modules.houses.service import HouseService
from app.modules.push.expo_client import ExpoPushClient
from app.modules.push.schemas import PushMessage
from app.modules.push.service import PushTokenService
from app.modules.signup_windows.schemas import (
    SignupWindowCreate, SignupWindowResponse, SignupWindowStatus,
    ScheduleWindowsResult, OpenWindowsResult, TargetWeekend
)
from app.modules.signup_windows.scheduling import get_target_weekend, random_open_time, house_wants_windows
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime, timezone
from zoneinfo import ZoneInfo
import random
import logging

logger = logging.getLogger(__name__)


class SignupWindowService:
    def __init__(self, supabase: Client, push_client: ExpoPushClient, rng: Optional[random.Random] = None):
        self.supabase = supabase
        self.push_client = push_client
        self.rng = rng or random.Random()
        self.houses = HouseService(supabase)
        self.tokens = PushTokenService(supabase)

    @staticmethod
    def schedule_tz() -> ZoneInfo:
        return ZoneInfo(settings.schedule_timezone)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or datetime.now(self.schedule_tz())

    # Cron jobs

    def schedule_weekly_windows(self, now: Optional[datetime] = None) -> ScheduleWindowsResult:
        """Create a scheduled window for the weekend after next in every house that wants one."""
        now = self._now(now)
        logger.info("Starting weekly signup window scheduling...")

        houses = self.supabase.table("houses").select("id, name, settings").execute().data or []
        if not houses:
            return ScheduleWindowsResult(success=True, message="No houses found")

        enabled_houses = [h for h in houses if house_wants_windows(h.get("settings"))]
        if not enabled_houses:
            return ScheduleWindowsResult(success=True, message="No houses have bed signup enabled")

        logger.info(f"Found {len(enabled_houses)} houses with bed signup enabled")
        friday, sunday, monday = get_target_weekend(now)
        target_start = format_local_date(friday)
        target_end = format_local_date(sunday)
        logger.info(f"Creating windows for weekend: {target_start} to {target_end}")

        windows_created = 0
        errors: List[str] = []
        for house in enabled_houses:
            try:
                existing = self.supabase.table("signup_windows")\
                    .select("id")\
                    .eq("house_id", house["id"])\
                    .eq("target_weekend_start", target_start)\
                    .limit(1)\
                    .execute()
                if existing.data:
                    logger.info(f"Window already exists for house {house['name']} ({house['id']})")
                    continue

                beds = self.supabase.table("beds")\
                    .select("id", count="exact")\
                    .eq("house_id", house["id"])\
                    .execute()
                if not beds.count:
                    logger.info(f"House {house['name']} has no beds configured, skipping")
                    continue

                opens_at = random_open_time(monday, tz=now.tzinfo, rng=self.rng)
                self.supabase.table("signup_windows").insert({
                    "house_id": house["id"],
                    "target_weekend_start": target_start,
                    "target_weekend_end": target_end,
                    "opens_at": opens_at.astimezone(timezone.utc).isoformat(),
                    "status": "scheduled",
                }).execute()
                windows_created += 1
                logger.info(f"Created window for house {house['name']}, opens at {opens_at.isoformat()}")
            except Exception as e:
                logger.error(f"Error creating window for house {house['id']}: {e}")
                errors.append(f"{house['name']}: {e}")

        result = ScheduleWindowsResult(
            success=not errors,
            windows_created=windows_created,
            target_weekend=TargetWeekend(start=friday, end=sunday),
            errors=errors or None,
        )
        logger.info(f"Scheduling complete: {result.model_dump(exclude_none=True)}")
        return result

    def open_due_windows(self, now: Optional[datetime] = None) -> OpenWindowsResult:
        """Open every scheduled window whose opens_at has passed and notify the house."""
        now = self._now(now)
        logger.info("Checking for signup windows to open...")

        windows = self.supabase.table("signup_windows")\
            .select("id, house_id, target_weekend_start, target_weekend_end, opens_at")\
            .eq("status", "scheduled")\
            .lte("opens_at", now.astimezone(timezone.utc).isoformat())\
            .execute().data or []
        if not windows:
            return OpenWindowsResult(success=True, message="No windows to open")

        logger.info(f"Found {len(windows)} windows to open")
        house_ids = list({w["house_id"] for w in windows})
        houses = self.supabase.table("houses").select("id, name").in_("id", house_ids).execute().data or []
        house_names = {h["id"]: h["name"] for h in houses}

        windows_opened = 0
        notifications_sent = 0
        errors: List[str] = []
        for window in windows:
            house_id = window["house_id"]
            house_name = house_names.get(house_id, "your house")
            logger.info(f"Opening window {window['id']} for house {house_name}")
            try:
                opened = self.supabase.table("signup_windows")\
                    .update({"status": "open"})\
                    .eq("id", window["id"])\
                    .eq("status", "scheduled")\
                    .execute()
            except Exception as e:
                logger.error(f"Error opening window {window['id']}: {e}")
                errors.append(f"Window {window['id']}: {e}")
                continue
            if not opened.data:
                logger.info(f"Window {window['id']} was already opened by another run")
                continue
            windows_opened += 1

            try:
                notifications_sent += self._notify_window_open(window, house_name)
            except Exception as e:
                logger.error(f"Error sending notifications for house {house_name}: {e}")
                errors.append(f"Notifications for {house_name}: {e}")

        result = OpenWindowsResult(
            success=not errors,
            windows_opened=windows_opened,
            notifications_sent=notifications_sent,
            errors=errors or None,
        )
        logger.info(f"Window opening complete: {result.model_dump(exclude_none=True)}")
        return result

    def _notify_window_open(self, window: Dict[str, Any], house_name: str) -> int:
        member_ids = self.houses.get_member_ids(window["house_id"])
        if not member_ids:
            logger.info(f"No members found for house {house_name}")
            return 0
        tokens = self.tokens.tokens_for_users(member_ids)
        if not tokens:
            logger.info(f"No push tokens found for house {house_name}")
            return 0

        weekend = format_weekend_range(window["target_weekend_start"], window["target_weekend_end"])
        title = "Bed Sign-Up Open!"
        body = f"Sign-up for beds ({weekend} weekend) is now open at {house_name}. Claim your spot!"
        data = {
            "type": "bed_signup_open",
            "windowId": window["id"],
            "houseId": window["house_id"],
            "houseName": house_name,
            "weekendStart": window["target_weekend_start"],
            "weekendEnd": window["target_weekend_end"],
        }
        messages = [PushMessage(to=t["token"], title=title, body=body, data=data) for t in tokens]
        self.push_client.send(messages)
        logger.info(f"Sent {len(messages)} notifications for house {house_name}")
        return len(messages)

    # Admin operations

    def _get_window(self, house_id: str, window_id: str) -> Dict[str, Any]:
        result = self.supabase.table("signup_windows")\
            .select("*")\
            .eq("id", window_id)\
            .eq("house_id", house_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Signup window not found")
        return result.data

    def _latest_with_status(self, house_id: str, status: str, ascending: bool) -> Optional[SignupWindowResponse]:
        result = self.supabase.table("signup_windows")\
            .select("*")\
            .eq("house_id", house_id)\
            .eq("status", status)\
            .order("opens_at", desc=not ascending)\
            .limit(1)\
            .execute()
        return SignupWindowResponse(**result.data[0]) if result.data else None

    def get_window_status(self, house_id: str) -> SignupWindowStatus:
        """Open window (if any), otherwise the next scheduled one, plus whether beds exist"""
        try:
            beds = self.supabase.table("beds")\
                .select("id", count="exact")\
                .eq("house_id", house_id)\
                .execute()
            has_beds = bool(beds.count)
            active = self._latest_with_status(house_id, "open", ascending=False)
            if active:
                return SignupWindowStatus(active_window=active, has_beds=has_beds)
            upcoming = self._latest_with_status(house_id, "scheduled", ascending=True)
            return SignupWindowStatus(next_scheduled_window=upcoming, has_beds=has_beds)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_window(self, house_id: str, window_data: SignupWindowCreate) -> SignupWindowResponse:
        try:
            opens_at = window_data.opens_at or datetime.now(timezone.utc)
            result = self.supabase.table("signup_windows").insert({
                "house_id": house_id,
                "target_weekend_start": format_local_date(window_data.target_weekend_start),
                "target_weekend_end": format_local_date(window_data.target_weekend_end),
                "opens_at": opens_at.isoformat(),
                "status": window_data.status,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create signup window")

            return SignupWindowResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _set_status(self, house_id: str, window_id: str, update_data: Dict[str, Any]) -> SignupWindowResponse:
        try:
            self._get_window(house_id, window_id)
            result = self.supabase.table("signup_windows")\
                .update(update_data)\
                .eq("id", window_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Signup window not found")

            return SignupWindowResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def open_window(self, house_id: str, window_id: str) -> SignupWindowResponse:
        """Open a window immediately (no notification; members see it on next load)"""
        return self._set_status(house_id, window_id, {
            "status": "open",
            "opens_at": datetime.now(timezone.utc).isoformat(),
        })

    def close_window(self, house_id: str, window_id: str) -> SignupWindowResponse:
        return self._set_status(house_id, window_id, {
            "status": "closed",
            "closed_at": datetime.now(timezone.utc).isoformat(),
        })
