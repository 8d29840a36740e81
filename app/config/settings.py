from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for push fan-out, scheduling and account deletion

    # Expo push gateway
    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    expo_push_batch_size: int = 100  # Expo accepts at most 100 messages per request
    expo_access_token: Optional[str] = None
    expo_push_timeout_seconds: float = 10.0

    # Cron / scheduler
    cron_secret: Optional[str] = None  # Sent by the cron runner in X-Cron-Secret
    scheduler_enabled: bool = False
    signup_scheduler_interval_seconds: int = 60
    signup_schedule_weekday: int = 6  # datetime.weekday(): 6 = Sunday
    schedule_timezone: str = "UTC"

    # Weather
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_cache_ttl_seconds: int = 1800

    # Expenses
    default_guest_nightly_rate: float = 50.0

    # Storage buckets holding per-user files (path prefix = user id)
    user_storage_buckets: str = "avatars,broll,chat-attachments,receipts"

    # App
    app_name: str = "mokki-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_user_storage_buckets(self) -> List[str]:
        return [b.strip() for b in self.user_storage_buckets.split(",") if b.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
