"""Application settings loaded from the environment (and ``.env``).

Framework configuration (providers, brokers, environment overlays) lives in
``domain.toml`` next to the domain; the values here are the service's own.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    value = _get_env(*keys)
    if value is None:
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    allowed_emails_csv: str
    session_ttl_seconds: int
    verification_code_ttl_seconds: int
    email_adapter: str
    email_from: str
    conflict_retry_attempts: int
    cors_origins: tuple[str, ...]
    smtp_host: str
    smtp_port: int
    smtp_username: str | None
    smtp_password: str | None


def load_settings() -> Settings:
    """Read a fresh ``Settings`` from the current environment."""
    origins = _get_env("CORS_ORIGINS", default="*") or "*"
    return Settings(
        allowed_emails_csv=_get_env(
            "ALLOWED_EMAILS_CSV", default=str(ROOT_DIR / "data" / "allowed_emails.csv")
        ),
        session_ttl_seconds=_get_int("SESSION_TTL_SECONDS", default=3600),
        verification_code_ttl_seconds=_get_int("VERIFICATION_CODE_TTL_SECONDS", default=600),
        email_adapter=_get_env("EMAIL_ADAPTER", default="fake"),
        email_from=_get_env("EMAIL_FROM", default="no-reply@clubsupply.local"),
        conflict_retry_attempts=_get_int("CONFLICT_RETRY_ATTEMPTS", default=3),
        cors_origins=tuple(origin.strip() for origin in origins.split(",") if origin.strip()),
        smtp_host=_get_env("SMTP_HOST", default="localhost"),
        smtp_port=_get_int("SMTP_PORT", default=587),
        smtp_username=_get_env("SMTP_USERNAME"),
        smtp_password=_get_env("SMTP_PASSWORD"),
    )


settings = load_settings()


def get_settings() -> Settings:
    return settings
