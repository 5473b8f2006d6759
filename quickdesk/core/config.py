from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional
import secrets

class Settings(BaseSettings):
    # ----------------------------------
    # App General Info
    # ----------------------------------
    PROJECT_NAME: str = "QuickDesk"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = Field(
        default="development",
        description="Current environment: development, testing, staging, or production"
    )
    LOG_LEVEL: str = Field(default="INFO")

    # ----------------------------------
    # Relational Database (users, tickets, chats, notifications)
    # ----------------------------------
    DATABASE_URL: str = Field(default="sqlite:///./quickdesk.db")

    # ----------------------------------
    # Auth (JWT)
    # ----------------------------------
    JWT_SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(48),
        description="JWT signing secret. Set in .env for stable sessions.",
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24)

    ADMIN_REGISTRATION_KEYS: List[str] = Field(
        default=["ADMIN2024", "SUPERADMIN", "QUICKDESK_ADMIN"],
        description="Keys accepted when a user self-registers with role=admin",
    )

    # ----------------------------------
    # Admin bootstrap (optional)
    # ----------------------------------
    ADMIN_BOOTSTRAP_EMAIL: Optional[str] = Field(default=None, description="Create/update the admin with this login email on startup")
    ADMIN_BOOTSTRAP_USERNAME: str = Field(default="admin", description="Display name of the bootstrapped admin")
    ADMIN_BOOTSTRAP_PASSWORD: Optional[str] = Field(default=None, description="Admin password used on startup bootstrap")

    # ----------------------------------
    # Tickets & routing
    # ----------------------------------
    UPLOAD_DIR: str = Field(default="uploads", description="Directory for ticket attachments")
    TICKETS_PAGE_SIZE: int = 10
    NOTIFICATIONS_LIMIT: int = 50
    BEST_PROVIDERS_LIMIT: int = Field(
        default=3,
        description="How many ranked agents are surfaced to the ticket creator",
    )

    # ----------------------------------
    # Outbound email (skipped when SMTP_HOST is unset)
    # ----------------------------------
    SMTP_HOST: Optional[str] = Field(default=None)
    SMTP_PORT: int = Field(default=587)
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_USE_TLS: bool = Field(default=True)
    SMTP_TIMEOUT_SECONDS: float = Field(default=10.0)
    MAIL_FROM: str = Field(default="helpdesk@quickdesk.local")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()
