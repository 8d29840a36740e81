from supabase import Client
from app.modules.push.schemas import PushTokenRegister, PushTokenResponse
from typing import List, Dict
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class PushTokenService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def tokens_for_users(self, user_ids: List[str]) -> List[Dict[str, str]]:
        """Return push_tokens rows (user_id, token) for the given users. Errors propagate."""
        if not user_ids:
            return []
        result = self.supabase.table("push_tokens")\
            .select("user_id, token")\
            .in_("user_id", user_ids)\
            .execute()
        return result.data or []

    def register_token(self, user_id: str, token_data: PushTokenRegister) -> PushTokenResponse:
        """Store a device token for the user; re-registering the same token refreshes it."""
        try:
            result = self.supabase.table("push_tokens").upsert(
                {
                    "user_id": user_id,
                    "token": token_data.token,
                    "platform": token_data.platform,
                    "device_id": token_data.device_id,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="user_id,token",
            ).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to register push token")

            return PushTokenResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_token(self, user_id: str, token: str) -> bool:
        try:
            result = self.supabase.table("push_tokens")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("token", token)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
