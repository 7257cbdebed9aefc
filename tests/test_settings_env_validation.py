from __future__ import annotations

import pytest

from core import settings as settings_module


def _set_minimal_valid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    values = {
        "ENV": "development",
        "SECRET_KEY": "secret",
        "MONGO_URL": "mongodb://localhost:27017",
        "DB_NAME": "pi_docs",
        "EMAIL_PORT": "587",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    for key in ("LOG_FORMAT", "EMAIL_FROM"):
        monkeypatch.delenv(key, raising=False)


def test_collect_missing_required_env_vars_reports_database_settings(monkeypatch: pytest.MonkeyPatch):
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.delenv("MONGO_URL", raising=False)
    monkeypatch.setenv("DB_NAME", "   ")

    missing = settings_module.collect_missing_required_env_vars()

    assert missing == ["DB_NAME", "MONGO_URL"]


def test_secret_key_is_only_required_in_production(monkeypatch: pytest.MonkeyPatch):
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.delenv("SECRET_KEY", raising=False)

    assert "SECRET_KEY" not in settings_module.collect_missing_required_env_vars()

    monkeypatch.setenv("ENV", "production")
    assert "SECRET_KEY" in settings_module.collect_missing_required_env_vars()


def test_validate_required_environment_raises_with_missing_and_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
):
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("ENV", "staging")
    monkeypatch.setenv("EMAIL_PORT", "not-a-number")
    monkeypatch.setenv("LOG_FORMAT", "xml")
    monkeypatch.delenv("DB_NAME", raising=False)

    with pytest.raises(RuntimeError) as exc_info:
        settings_module.validate_required_environment()

    message = str(exc_info.value)
    assert "Missing required environment variables" in message
    assert "- DB_NAME" in message
    assert "Invalid environment values" in message
    assert "ENV must be one of" in message
    assert "EMAIL_PORT must be a positive integer" in message
    assert "LOG_FORMAT must be one of" in message


def test_get_settings_applies_defaults(monkeypatch: pytest.MonkeyPatch):
    _set_minimal_valid_env(monkeypatch)
    for key in ("UPLOAD_DIR", "S3_PREFIX", "FRONTEND_URL", "CORS_ORIGINS", "CELERY_BROKER_URL", "REDIS_URL"):
        monkeypatch.delenv(key, raising=False)
    settings_module.get_settings.cache_clear()

    try:
        settings = settings_module.get_settings()
    finally:
        settings_module.get_settings.cache_clear()

    assert settings.upload_dir == "./uploads"
    assert settings.s3_prefix == "pi-docs"
    assert settings.frontend_url == "http://localhost:3000"
    assert settings.cors_origins == ("http://localhost:3000",)
    assert settings.celery_broker_url is None
    assert settings.is_development is True


def test_celery_urls_fall_back_to_redis_url(monkeypatch: pytest.MonkeyPatch):
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")
    monkeypatch.delenv("CELERY_BROKER_URL", raising=False)
    monkeypatch.delenv("CELERY_RESULT_BACKEND", raising=False)
    settings_module.get_settings.cache_clear()

    try:
        settings = settings_module.get_settings()
    finally:
        settings_module.get_settings.cache_clear()

    assert settings.celery_broker_url == "redis://cache:6379/0"
    assert settings.celery_result_backend == "redis://cache:6379/0"
