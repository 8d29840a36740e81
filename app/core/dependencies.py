"""
Core dependencies for route protection and house membership checks
"""

import hmac
from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase, get_auth_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_auth_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_membership(house_id: str, user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    """Return the accepted house_members row for user in house, or None."""
    try:
        result = supabase.table("house_members")\
            .select("id, role, invite_status")\
            .eq("house_id", house_id)\
            .eq("user_id", user_id)\
            .eq("invite_status", "accepted")\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None
    except Exception as e:
        logger.error(f"Error getting membership for house {house_id}: {e}")
        return None


def get_user_house_ids(user_id: str, supabase: Client) -> List[str]:
    """Return ids of houses the user has accepted membership in."""
    try:
        result = supabase.table("house_members")\
            .select("house_id")\
            .eq("user_id", user_id)\
            .eq("invite_status", "accepted")\
            .execute()
        return [m["house_id"] for m in (result.data or [])]
    except Exception as e:
        logger.error(f"Error getting user house ids: {e}")
        return []


def check_house_member(
    house_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Check if user is an accepted member of the house"""
    if get_membership(house_id, user_data["id"], supabase):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a member of this house"
    )


def check_house_admin(
    house_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Check if user is an admin of the house"""
    membership = get_membership(house_id, user_data["id"], supabase)
    if membership and membership.get("role") == "admin":
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a house admin to perform this action"
    )


def require_cron_secret(x_cron_secret: Optional[str] = Header(default=None)) -> None:
    """Guard for cron-triggered jobs. Rejects everything when no secret is configured."""
    expected = settings.cron_secret
    if not expected or not x_cron_secret or not hmac.compare_digest(x_cron_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid cron secret"
        )
