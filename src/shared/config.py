"""Runtime configuration read from environment variables."""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def current_env() -> str:
    return (os.getenv("STOREFRONT_ENV") or os.getenv("ENV") or os.getenv("ENVIRONMENT") or "development").lower()


@dataclass(frozen=True)
class Settings:
    env: str
    mongo_uri: str
    mongo_database: str
    store_timeout_ms: int
    email_adapter: str
    soft_delete_strict: bool
    expose_error_details: bool
    admin_email: str | None
    admin_name: str | None
    smtp_host: str
    smtp_port: int
    smtp_user: str | None
    smtp_password: str | None
    email_from: str | None

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "staging")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings(
            env=current_env(),
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_database=os.getenv("MONGO_DATABASE", "storefront"),
            store_timeout_ms=int(os.getenv("STORE_TIMEOUT_MS", "5000")),
            email_adapter=os.getenv("EMAIL_ADAPTER", "fake"),
            soft_delete_strict=_flag("ORDER_SOFT_DELETE_STRICT"),
            expose_error_details=_flag("EXPOSE_ERROR_DETAILS"),
            admin_email=os.getenv("ADMIN_EMAIL"),
            admin_name=os.getenv("ADMIN_NAME"),
            smtp_host=os.getenv("SMTP_HOST", "localhost"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER"),
            smtp_password=os.getenv("SMTP_PASSWORD"),
            email_from=os.getenv("EMAIL_FROM"),
        )
    return _settings


def reset_settings():
    """Drop cached settings so the next call re-reads the environment (useful for testing)."""
    global _settings
    _settings = None
