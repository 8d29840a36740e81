"""
Supabase clients.

Bearer tokens are verified with the anon client. Everything else (house
fan-out, cron jobs, storage cleanup, auth admin calls) runs on the service
role client, which bypasses row-level security, so house membership is
checked in app.core.dependencies before house data is read or written.
"""

import logging
from typing import Optional
from supabase import create_client, Client
from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    _anon_client: Optional[Client] = None
    _service_client: Optional[Client] = None

    @classmethod
    def get_anon_client(cls) -> Client:
        if cls._anon_client is None:
            cls._anon_client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._anon_client

    @classmethod
    def get_service_client(cls) -> Client:
        if cls._service_client is None:
            if settings.supabase_service_role_key:
                cls._service_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
            else:
                logger.warning(
                    "SUPABASE_SERVICE_ROLE_KEY is not set; using the anon key. "
                    "Row-level security applies and account deletion will fail."
                )
                cls._service_client = cls.get_anon_client()
        return cls._service_client

    @classmethod
    def reset_clients(cls):
        cls._anon_client = None
        cls._service_client = None


def get_supabase() -> Client:
    """Service role client for request handlers and jobs"""
    return SupabaseClient.get_service_client()


def get_auth_supabase() -> Client:
    """Anon client used only to resolve bearer tokens"""
    return SupabaseClient.get_anon_client()
