"""Application settings loaded from environment variables."""

from __future__ import annotations

from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Item store
    store_backend: str = "supabase"
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_http_max_connections: int = 100
    supabase_http_max_keepalive_connections: int = 50
    supabase_postgrest_timeout_seconds: int = 30
    items_table: str = "items"
    store_page_size: int = 1000

    # App
    app_name: str = "Chore Coins API"
    app_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"
    enable_scheduler: bool = True
    cron_secret: str = ""

    # Scheduling
    timezone: str = "Australia/Sydney"
    daily_reset_hour: int = 22
    daily_reset_minute: int = 0

    # Ledger
    balance_write_retries: int = 3
    spend_floor: Decimal = Decimal("-5.00")

    # Performance tuning
    slow_request_log_threshold_ms: int = 0
    slow_query_log_threshold_ms: int = 0

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
