import logging
import logging.handlers
import sys
import time
from pathlib import Path
from types import TracebackType

from paceflow.config import Settings

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
LOG_FORMATTER = logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT)

# Track logging state
_LOG_FILE_PATH: Path | None = None
_LOGGING_INITIALIZED = False


class TruncatedFormatter(logging.Formatter):
  """Formatter that truncates the stack trace to the last few lines."""

  # ruff: noqa: N802
  def formatException(self, ei: tuple[type[BaseException] | None, BaseException | None, TracebackType | None]) -> str:
    import traceback

    lines = traceback.format_exception(*ei)
    # Keep header + last 5 lines of traceback
    if len(lines) > 6:
      return "".join(lines[:1] + ["    ...\n"] + lines[-5:])
    return "".join(lines)


def _build_file_handler(settings: Settings, log_dir: Path) -> tuple[logging.Handler, Path]:
  """Create a rotating file handler inside `log_dir`."""
  try:
    log_dir.mkdir(parents=True, exist_ok=True)
  except OSError as exc:
    raise RuntimeError(f"Failed to create log directory at {log_dir}: {exc}") from exc

  log_path = log_dir / f"paceflow_{time.strftime('%Y%m%d_%H%M%S')}.log"
  file_handler = logging.handlers.RotatingFileHandler(log_path, encoding="utf-8", maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count)

  # Name backups app.log-1 instead of app.log.1
  def custom_namer(default_name: str) -> str:
    parts = default_name.rsplit(".", 1)
    if len(parts) == 2 and parts[1].isdigit():
      return f"{parts[0]}-{parts[1]}"
    return default_name

  file_handler.namer = custom_namer
  file_handler.setFormatter(LOG_FORMATTER)
  return file_handler, log_path


def setup_logging(settings: Settings) -> Path | None:
  """Route uvicorn, fastapi and application loggers through shared handlers."""
  stream_handler = logging.StreamHandler(sys.stdout)
  stream_handler.setFormatter(TruncatedFormatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
  handlers: list[logging.Handler] = [stream_handler]
  log_path = None
  if settings.log_dir is not None:
    file_handler, log_path = _build_file_handler(settings, settings.log_dir)
    handlers.append(file_handler)

  for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
    log = logging.getLogger(logger_name)
    log.handlers = list(handlers)
    log.propagate = False

  level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
  logging.basicConfig(level=level, handlers=handlers, force=True)
  # httpx logs every request at INFO; keep it quiet unless debugging.
  logging.getLogger("httpx").setLevel(logging.DEBUG if settings.debug else logging.WARNING)
  return log_path


def initialize_logging(settings: Settings) -> None:
  """Initialize logging once per process and log where output goes."""
  global _LOG_FILE_PATH, _LOGGING_INITIALIZED
  logger = logging.getLogger("paceflow.core.logging")
  if _LOGGING_INITIALIZED:
    return
  _LOG_FILE_PATH = setup_logging(settings)
  _LOGGING_INITIALIZED = True
  if _LOG_FILE_PATH is not None:
    logger.info("Logging initialized. Writing to %s", _LOG_FILE_PATH)
  else:
    logger.info("Logging initialized (stdout only).")
