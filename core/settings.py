from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_ENVIRONMENTS = {"development", "test", "production"}
SUPPORTED_LOG_FORMATS = {"plain", "json"}
TRUTHY = {"1", "true", "yes"}


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _flag(name: str, default: str = "false") -> bool:
    return (_env(name) or default).lower() in TRUTHY


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    for var_name in ("MONGO_URL", "DB_NAME"):
        if _env(var_name) is None:
            missing.append(var_name)

    if (_env("ENV") or "development").lower() == "production":
        if _env("SECRET_KEY") is None:
            missing.append("SECRET_KEY")

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    env = (_env("ENV") or "development").lower()
    if env not in SUPPORTED_ENVIRONMENTS:
        invalid_values.append("ENV must be one of: development, test, production")

    email_port = _env("EMAIL_PORT")
    if email_port is not None:
        try:
            parsed_port = int(email_port)
            if parsed_port <= 0:
                raise ValueError("must be positive")
        except ValueError:
            invalid_values.append("EMAIL_PORT must be a positive integer")

    log_format = _env("LOG_FORMAT")
    if log_format is not None and log_format.lower() not in SUPPORTED_LOG_FORMATS:
        invalid_values.append("LOG_FORMAT must be one of: plain, json")

    email_from = _env("EMAIL_FROM")
    if email_from is not None and "@" not in email_from:
        invalid_values.append("EMAIL_FROM must be an email address")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    secret_key: str
    mongo_url: str
    db_name: str
    cors_origins: tuple[str, ...]
    debug_include_error_details: bool
    redis_url: str | None
    role_rate_limits: str | None
    upload_dir: str
    s3_region: str | None
    s3_bucket: str | None
    s3_prefix: str
    s3_kms_key_id: str | None
    s3_endpoint_url: str | None
    email_host: str | None
    email_port: int
    email_username: str | None
    email_password: str | None
    email_from: str
    email_use_ssl: bool
    frontend_url: str
    celery_broker_url: str | None
    celery_result_backend: str | None

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.env.lower() == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    return Settings(
        env=(_env("ENV") or "development").lower(),
        secret_key=_env("SECRET_KEY") or "dev_change_me",
        mongo_url=_env("MONGO_URL") or "",
        db_name=_env("DB_NAME") or "",
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")) or ("http://localhost:3000",),
        debug_include_error_details=_flag("DEBUG_INCLUDE_ERROR_DETAILS"),
        redis_url=_env("REDIS_URL"),
        role_rate_limits=_env("ROLE_RATE_LIMITS"),
        upload_dir=_env("UPLOAD_DIR") or "./uploads",
        s3_region=_env("S3_REGION"),
        s3_bucket=_env("S3_BUCKET"),
        s3_prefix=_env("S3_PREFIX") or "pi-docs",
        s3_kms_key_id=_env("S3_KMS_KEY_ID"),
        s3_endpoint_url=_env("S3_ENDPOINT_URL"),
        email_host=_env("EMAIL_HOST"),
        email_port=int(_env("EMAIL_PORT") or "587"),
        email_username=_env("EMAIL_USERNAME"),
        email_password=_env("EMAIL_PASSWORD"),
        email_from=_env("EMAIL_FROM") or "noreply@pi-docs.com",
        email_use_ssl=_flag("EMAIL_USE_SSL"),
        frontend_url=(_env("FRONTEND_URL") or "http://localhost:3000").rstrip("/"),
        celery_broker_url=_env("CELERY_BROKER_URL") or _env("REDIS_URL"),
        celery_result_backend=_env("CELERY_RESULT_BACKEND") or _env("REDIS_URL"),
    )
