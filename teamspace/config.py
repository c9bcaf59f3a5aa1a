"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Teamspace"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite:// is accepted for local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/teamspace_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    access_token_expire_days: int = 7

    # Membership
    invitation_expire_days: int = 7

    # Email verification
    verification_token_expire_hours: int = 24
    verification_resend_limit_per_hour: int = 3  # 0 = disabled

    # Links embedded in outgoing email
    frontend_url: str = "http://localhost:3000"

    # SMTP / Email
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'teamspace_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.access_token_expire_days = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", str(self.access_token_expire_days))
        )
        self.invitation_expire_days = int(
            os.getenv("INVITATION_EXPIRE_DAYS", str(self.invitation_expire_days))
        )
        self.verification_token_expire_hours = int(
            os.getenv(
                "VERIFICATION_TOKEN_EXPIRE_HOURS",
                str(self.verification_token_expire_hours),
            )
        )
        self.verification_resend_limit_per_hour = int(
            os.getenv(
                "VERIFICATION_RESEND_LIMIT_PER_HOUR",
                str(self.verification_resend_limit_per_hour),
            )
        )

        self.frontend_url = os.getenv("FRONTEND_URL", self.frontend_url).rstrip("/")

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
