"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from paceflow.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
  """Typed settings for the PaceFlow client service."""

  environment: str
  debug: bool
  api_base_url: str
  request_timeout_seconds: float
  export_dir: Path
  allowed_origins: tuple[str, ...]
  log_level: str
  log_dir: Path | None
  log_max_bytes: int
  log_backup_count: int


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  origins = [origin.strip() for origin in (raw or DEFAULT_ALLOWED_ORIGINS).split(",") if origin.strip()]

  if not origins:
    raise ValueError("PACEFLOW_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("PACEFLOW_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_base_url(raw: str | None) -> str:
  # A blank variable counts as unset so the fallback still applies.
  value = _optional_str(raw) or DEFAULT_API_BASE_URL
  if not value.startswith(("http://", "https://")):
    raise ValueError("PACEFLOW_API_BASE_URL must be an http(s) URL.")
  return value.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("PACEFLOW_ENV", "development").strip().lower()
  debug = _parse_bool(os.getenv("PACEFLOW_DEBUG"))

  request_timeout_seconds = float(os.getenv("PACEFLOW_REQUEST_TIMEOUT_SECONDS", "30"))
  if request_timeout_seconds <= 0:
    raise ValueError("PACEFLOW_REQUEST_TIMEOUT_SECONDS must be positive.")

  log_level = (os.getenv("PACEFLOW_LOG_LEVEL") or "INFO").strip().upper()
  if log_level not in _LOG_LEVELS:
    raise ValueError(f"PACEFLOW_LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}.")

  log_max_bytes = int(os.getenv("PACEFLOW_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("PACEFLOW_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("PACEFLOW_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("PACEFLOW_LOG_BACKUP_COUNT must be zero or a positive integer.")

  log_dir_raw = _optional_str(os.getenv("PACEFLOW_LOG_DIR"))

  return Settings(
    environment=environment,
    debug=debug,
    api_base_url=_parse_base_url(os.getenv("PACEFLOW_API_BASE_URL")),
    request_timeout_seconds=request_timeout_seconds,
    export_dir=Path(os.getenv("PACEFLOW_EXPORT_DIR", "./exports").strip()).expanduser(),
    allowed_origins=_parse_origins(os.getenv("PACEFLOW_ALLOWED_ORIGINS")),
    log_level=log_level,
    log_dir=Path(log_dir_raw).expanduser() if log_dir_raw else None,
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
  )
