"""Application settings loaded from environment."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed settings for the pipeline and its collaborators."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    pghost: Optional[str] = Field(default=None, alias="PGHOST")
    pgport: int = Field(default=5432, alias="PGPORT")
    pguser: Optional[str] = Field(default=None, alias="PGUSER")
    pgpassword: Optional[str] = Field(default=None, alias="PGPASSWORD")
    pgdatabase: Optional[str] = Field(default=None, alias="PGDATABASE")

    # Reddit
    reddit_client_id: Optional[str] = Field(default=None, alias="REDDIT_CLIENT_ID")
    reddit_client_secret: Optional[str] = Field(default=None, alias="REDDIT_CLIENT_SECRET")
    reddit_user_agent: str = Field(default="CivicMirror/1.0", alias="REDDIT_USER_AGENT")
    reddit_public_base_url: str = Field(
        default="https://www.reddit.com", alias="REDDIT_PUBLIC_BASE_URL"
    )
    reddit_oauth_base_url: str = Field(
        default="https://oauth.reddit.com", alias="REDDIT_OAUTH_BASE_URL"
    )
    reddit_timeout_seconds: float = Field(default=15.0, alias="REDDIT_TIMEOUT_SECONDS")
    reddit_token_timeout_seconds: float = Field(
        default=10.0, alias="REDDIT_TOKEN_TIMEOUT_SECONDS"
    )
    reddit_max_retries: int = Field(default=2, alias="REDDIT_MAX_RETRIES")
    reddit_source_delay_seconds: float = Field(
        default=0.5, alias="REDDIT_SOURCE_DELAY_SECONDS"
    )

    # Geocoding (OpenStreetMap Nominatim)
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org", alias="NOMINATIM_BASE_URL"
    )
    nominatim_user_agent: str = Field(
        default="CivicMirrorApp/1.0 (contact@civicmirror.in)", alias="NOMINATIM_USER_AGENT"
    )
    geocode_timeout_seconds: float = Field(default=8.0, alias="GEOCODE_TIMEOUT_SECONDS")
    geocode_min_interval_seconds: float = Field(
        default=1.1, alias="GEOCODE_MIN_INTERVAL_SECONDS"
    )

    # Batch processing
    batch_post_delay_seconds: float = Field(default=1.2, alias="BATCH_POST_DELAY_SECONDS")
    batch_max_posts: int = Field(default=20, alias="BATCH_MAX_POSTS")

    # Email (SMTP)
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: Optional[str] = Field(default=None, alias="SMTP_USER")
    smtp_password: Optional[str] = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_timeout_seconds: float = Field(default=10.0, alias="SMTP_TIMEOUT_SECONDS")
    email_from_name: str = Field(default="Civic Mirror", alias="EMAIL_FROM_NAME")

    # SMS (Twilio)
    twilio_account_sid: Optional[str] = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    twilio_auth_token: Optional[str] = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    twilio_phone_number: Optional[str] = Field(default=None, alias="TWILIO_PHONE_NUMBER")
    twilio_api_base_url: str = Field(
        default="https://api.twilio.com/2010-04-01", alias="TWILIO_API_BASE_URL"
    )
    twilio_timeout_seconds: float = Field(default=10.0, alias="TWILIO_TIMEOUT_SECONDS")

    # Notifications
    notify_mock_when_unconfigured: bool = Field(
        default=True, alias="NOTIFY_MOCK_WHEN_UNCONFIGURED"
    )
    tracking_base_url: str = Field(
        default="https://civicmirror.in/track", alias="TRACKING_BASE_URL"
    )

    # HTTP server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")

    # Runtime
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    run_env: str = Field(default="development", alias="RUN_ENV")

    def get_database_url(self) -> str:
        """Return a usable database URL or raise."""
        if self.database_url:
            return self.database_url

        if all([self.pghost, self.pguser, self.pgpassword, self.pgdatabase]):
            return (
                "postgresql://"
                f"{self.pguser}:{self.pgpassword}@{self.pghost}:{self.pgport}/"
                f"{self.pgdatabase}"
            )

        raise ValueError("DATABASE_URL or PG* env vars must be set")

    @property
    def has_database(self) -> bool:
        return bool(self.database_url) or all(
            [self.pghost, self.pguser, self.pgpassword, self.pgdatabase]
        )

    @property
    def has_reddit_oauth(self) -> bool:
        return bool(self.reddit_client_id and self.reddit_client_secret)

    @property
    def has_smtp(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    @property
    def has_twilio(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )
