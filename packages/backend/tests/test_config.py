"""Settings tests — env loading and the signing-secret guard."""

import pytest
from pydantic import ValidationError

from todoapp.config import DEFAULT_JWT_SECRET, Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.port == 5000
    assert s.token_expire_hours == 24
    assert s.cors_origins == ["*"]
    assert s.unowned_tasks_writable is True
    assert s.reject_invalid_tokens is False


def test_development_allows_default_secret():
    s = Settings(environment="development", jwt_secret=DEFAULT_JWT_SECRET)
    assert s.uses_default_secret


def test_production_requires_secret():
    with pytest.raises(ValidationError, match="TODOAPP_JWT_SECRET"):
        Settings(environment="production", jwt_secret=DEFAULT_JWT_SECRET)


def test_production_with_secret():
    s = Settings(environment="production", jwt_secret="s3cr3t-value")
    assert not s.uses_default_secret


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("TODOAPP_PORT", "8080")
    monkeypatch.setenv("TODOAPP_REJECT_INVALID_TOKENS", "true")
    s = Settings()
    assert s.port == 8080
    assert s.reject_invalid_tokens is True
