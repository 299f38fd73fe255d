"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Storage ───────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./entry_tracker.db"
    STORAGE_BACKEND: str = "sql"            # sql | memory

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Owner ─────────────────────────────────────────────────────────────
    DEFAULT_OWNER_ID: str = "default"       # Used when no X-Owner-Id header is sent

    # ── Reporting ─────────────────────────────────────────────────────────
    REPORT_TIMEZONE: str = "UTC"            # Calendar days for daily aggregates
    ENTRY_LIST_LIMIT: int = 50

    # ── QR rendering ──────────────────────────────────────────────────────
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 2
    QR_FILL_COLOR: str = "#1f2937"
    QR_BACK_COLOR: str = "#ffffff"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
