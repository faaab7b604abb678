"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "tracker_user"
    postgres_password: str = "password"
    postgres_db: str = "consultant_tracker"

    # Full SQLAlchemy URL, overrides the postgres_* fields when set
    database_url: Optional[str] = None

    # JWT (tokens are issued by the identity provider, we only verify)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # App
    environment: str = "development"  # development, staging, production
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_dir: Optional[str] = None

    # SMTP email channel
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True

    # Scheduled reports
    report_sender_email: str = ""
    report_recipient_emails: str = ""  # comma separated
    report_timezone: str = "America/New_York"
    report_hour: int = 19
    weekly_report_weekday: int = 4  # Monday=0, so 4 is Friday

    # Uploads
    upload_dir: str = "uploads"
    max_upload_mb: int = 5

    @property
    def db_url(self) -> str:
        """Construct the database connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.smtp_host)

    @property
    def report_recipients(self) -> List[str]:
        return [email.strip() for email in self.report_recipient_emails.split(",") if email.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
