from supabase import Client
from app.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, supabase: Client, buckets: Optional[List[str]] = None):
        self.supabase = supabase
        self.buckets = buckets if buckets is not None else settings.get_user_storage_buckets()

    def cleanup_storage_bucket(self, bucket: str, user_id: str) -> int:
        """Remove every file under <user_id>/ in bucket. Failures are logged, not raised."""
        try:
            files = self.supabase.storage.from_(bucket).list(user_id) or []
            if not files:
                return 0
            paths = [f"{user_id}/{f['name']}" for f in files]
            self.supabase.storage.from_(bucket).remove(paths)
            logger.info(f"Cleaned up {len(paths)} files from {bucket}")
            return len(paths)
        except Exception as e:
            logger.error(f"Error cleaning up {bucket}: {e}")
            return 0

    def delete_account(self, user_id: str) -> int:
        """Delete the user's stored files, then the auth user (cascades to profile rows).
        Returns the number of files removed."""
        logger.info(f"Deleting account for user {user_id}")
        removed = sum(self.cleanup_storage_bucket(bucket, user_id) for bucket in self.buckets)
        try:
            self.supabase.auth.admin.delete_user(user_id)
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete account")
        logger.info(f"Successfully deleted account for user {user_id}")
        return removed
