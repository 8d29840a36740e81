import hashlib
import time
from supabase import Client
from fastapi import HTTPException
from typing import Dict, Any, Optional

# Resolved users keyed by token hash. The mobile client fires several requests
# in parallel on every screen load, all carrying the same access token.
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _cached_user(key: str) -> Optional[Dict[str, Any]]:
    entry = _AUTH_USER_CACHE.get(key)
    if not entry:
        return None
    user_data, expiry = entry
    if time.monotonic() >= expiry:
        del _AUTH_USER_CACHE[key]
        return None
    return user_data


def _is_token_error(message: str) -> bool:
    lowered = message.lower()
    return "jwt" in lowered or "expired" in lowered or "invalid" in lowered


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve the member behind a Supabase access token (id, email, display name)."""
        key = _cache_key(token)
        user_data = _cached_user(key)
        if user_data:
            return user_data

        try:
            response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            detail = "Invalid or expired token" if _is_token_error(str(e)) else "Authentication failed"
            raise HTTPException(status_code=401, detail=detail)
        if not response or not response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = response.user
        metadata = user.user_metadata or {}
        user_data = {
            "id": user.id,
            "email": user.email,
            "display_name": metadata.get("display_name") or metadata.get("full_name"),
            "user_metadata": metadata,
            "app_metadata": user.app_metadata or {},
        }
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[key] = (user_data, time.monotonic() + _AUTH_CACHE_TTL_SEC)
        return user_data

    @staticmethod
    def clear_cache():
        _AUTH_USER_CACHE.clear()
