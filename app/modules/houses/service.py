from supabase import Client
from app.config.features_config import FEATURE_ORDER, FEATURE_ROUTES
from app.modules.houses.features import get_enabled_features, get_feature_label, is_feature_enabled
from app.modules.houses.schemas import FeatureConfigResponse, HouseFeaturesResponse
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class HouseService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_house(self, house_id: str) -> Dict[str, Any]:
        """Get house row (id, name, settings)"""
        try:
            result = self.supabase.table("houses")\
                .select("id, name, settings")\
                .eq("id", house_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="House not found")

            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_settings(self, house_id: str) -> Dict[str, Any]:
        return self.get_house(house_id).get("settings") or {}

    def get_member_ids(self, house_id: str, exclude_user_id: Optional[str] = None) -> List[str]:
        """User ids of accepted members, optionally without one user. Errors propagate."""
        query = self.supabase.table("house_members")\
            .select("user_id")\
            .eq("house_id", house_id)\
            .eq("invite_status", "accepted")
        if exclude_user_id:
            query = query.neq("user_id", exclude_user_id)
        result = query.execute()
        return [m["user_id"] for m in (result.data or []) if m.get("user_id")]

    def get_first_admin_id(self, house_id: str) -> Optional[str]:
        """Earliest-joined accepted admin of the house."""
        result = self.supabase.table("house_members")\
            .select("user_id")\
            .eq("house_id", house_id)\
            .eq("role", "admin")\
            .eq("invite_status", "accepted")\
            .order("joined_at")\
            .limit(1)\
            .execute()
        return result.data[0]["user_id"] if result.data else None

    def list_user_houses(self, user_id: str) -> List[Dict[str, Any]]:
        """Houses the user has joined, with their role"""
        try:
            memberships = self.supabase.table("house_members")\
                .select("house_id, role")\
                .eq("user_id", user_id)\
                .eq("invite_status", "accepted")\
                .execute()
            if not memberships.data:
                return []
            roles = {m["house_id"]: m["role"] for m in memberships.data}
            houses = self.supabase.table("houses")\
                .select("id, name")\
                .in_("id", list(roles.keys()))\
                .execute()
            return [
                {"id": h["id"], "name": h["name"], "role": roles.get(h["id"])}
                for h in (houses.data or [])
            ]
        except Exception as e:
            logger.error(f"Error listing houses for user {user_id}: {e}")
            return []

    def get_features(self, house_id: str) -> HouseFeaturesResponse:
        settings = self.get_settings(house_id)
        features = []
        for feature_id in FEATURE_ORDER:
            features.append(FeatureConfigResponse(
                id=feature_id,
                enabled=is_feature_enabled(settings, feature_id),
                label=get_feature_label(settings, feature_id),
                route=FEATURE_ROUTES[feature_id],
            ))
        return HouseFeaturesResponse(
            house_id=house_id,
            enabled=get_enabled_features(settings),
            features=features,
        )
