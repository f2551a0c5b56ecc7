from __future__ import annotations

import os
from pathlib import Path

import pytest

from paceflow.config import DEFAULT_API_BASE_URL, get_settings
from paceflow.utils.env import load_env_file

_VARIABLES = ("PACEFLOW_ENV", "PACEFLOW_DEBUG", "PACEFLOW_API_BASE_URL", "PACEFLOW_REQUEST_TIMEOUT_SECONDS", "PACEFLOW_EXPORT_DIR", "PACEFLOW_ALLOWED_ORIGINS", "PACEFLOW_LOG_LEVEL", "PACEFLOW_LOG_DIR", "PACEFLOW_LOG_MAX_BYTES", "PACEFLOW_LOG_BACKUP_COUNT")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
  # Work on a private copy so .env loading in these tests cannot leak into others.
  monkeypatch.setattr(os, "environ", dict(os.environ))
  for name in _VARIABLES:
    monkeypatch.delenv(name, raising=False)
  get_settings.cache_clear()
  yield
  get_settings.cache_clear()


def test_defaults() -> None:
  settings = get_settings()

  assert settings.api_base_url == DEFAULT_API_BASE_URL == "http://localhost:8000"
  assert settings.environment == "development"
  assert settings.debug is False
  assert settings.request_timeout_seconds == 30
  assert settings.allowed_origins == ("http://localhost:3000",)
  assert settings.log_level == "INFO"
  assert settings.log_dir is None
  assert settings.export_dir == Path("./exports")


def test_blank_base_url_uses_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("PACEFLOW_API_BASE_URL", "   ")
  assert get_settings().api_base_url == "http://localhost:8000"


def test_base_url_override_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("PACEFLOW_API_BASE_URL", "https://api.paceflow.example/")
  assert get_settings().api_base_url == "https://api.paceflow.example"


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
  first = get_settings()
  monkeypatch.setenv("PACEFLOW_API_BASE_URL", "http://other:9000")
  assert get_settings() is first


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
  monkeypatch.setenv("PACEFLOW_DEBUG", "yes")
  monkeypatch.setenv("PACEFLOW_ALLOWED_ORIGINS", "http://a.test, http://b.test,")
  monkeypatch.setenv("PACEFLOW_LOG_LEVEL", "debug")
  monkeypatch.setenv("PACEFLOW_LOG_DIR", str(tmp_path))
  monkeypatch.setenv("PACEFLOW_REQUEST_TIMEOUT_SECONDS", "2.5")

  settings = get_settings()

  assert settings.debug is True
  assert settings.allowed_origins == ("http://a.test", "http://b.test")
  assert settings.log_level == "DEBUG"
  assert settings.log_dir == tmp_path
  assert settings.request_timeout_seconds == 2.5


@pytest.mark.parametrize(
  ("name", "value"),
  [
    ("PACEFLOW_API_BASE_URL", "ftp://files.example"),
    ("PACEFLOW_ALLOWED_ORIGINS", "*"),
    ("PACEFLOW_REQUEST_TIMEOUT_SECONDS", "0"),
    ("PACEFLOW_LOG_LEVEL", "verbose"),
    ("PACEFLOW_LOG_MAX_BYTES", "-1"),
    ("PACEFLOW_LOG_BACKUP_COUNT", "-1"),
  ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
  monkeypatch.setenv(name, value)
  with pytest.raises(ValueError):
    get_settings()


def test_load_env_file_reads_only_prefixed_keys(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
  env_file = tmp_path / ".env"
  env_file.write_text("# local overrides\nexport PACEFLOW_ENV='staging'\nPACEFLOW_DEBUG = true\nOTHER_SECRET=nope\nPACEFLOW_LOG_LEVEL\n", encoding="utf-8")
  monkeypatch.delenv("OTHER_SECRET", raising=False)

  applied = load_env_file(env_file)

  assert applied == {"PACEFLOW_ENV": "staging", "PACEFLOW_DEBUG": "true"}
  assert "OTHER_SECRET" not in os.environ
  assert get_settings().environment == "staging"


def test_load_env_file_keeps_existing_values_unless_overridden(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
  env_file = tmp_path / ".env"
  env_file.write_text('PACEFLOW_API_BASE_URL="http://from-file:8000"\n', encoding="utf-8")
  monkeypatch.setenv("PACEFLOW_API_BASE_URL", "http://from-env:8000")

  assert load_env_file(env_file) == {}
  assert load_env_file(env_file, override=True) == {"PACEFLOW_API_BASE_URL": "http://from-file:8000"}
  assert get_settings().api_base_url == "http://from-file:8000"


def test_load_env_file_missing_file(tmp_path: Path) -> None:
  assert load_env_file(tmp_path / "absent.env") == {}
