from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from paceflow.config import Settings
from paceflow.core.logging import TruncatedFormatter, _build_file_handler


def _settings(log_dir: Path | None) -> Settings:
  return Settings(
    environment="test",
    debug=False,
    api_base_url="http://generator.test",
    request_timeout_seconds=5,
    export_dir=Path("exports"),
    allowed_origins=("http://localhost:3000",),
    log_level="INFO",
    log_dir=log_dir,
    log_max_bytes=2048,
    log_backup_count=2,
  )


def test_file_handler_writes_into_the_given_directory(tmp_path: Path) -> None:
  log_dir = tmp_path / "logs" / "nested"
  handler, log_path = _build_file_handler(_settings(None), log_dir)
  try:
    assert log_path.parent == log_dir
    assert log_path.name.startswith("paceflow_")
    assert isinstance(handler, logging.handlers.RotatingFileHandler)
    assert handler.maxBytes == 2048
    assert handler.backupCount == 2
    assert handler.namer("paceflow_x.log.1") == "paceflow_x.log-1"
    assert handler.namer("paceflow_x.log") == "paceflow_x.log"

    handler.emit(logging.LogRecord("paceflow.test", logging.INFO, __file__, 1, "hello file", None, None))
    handler.flush()
    assert "hello file" in log_path.read_text(encoding="utf-8")
  finally:
    handler.close()


def test_truncated_formatter_keeps_the_tail_of_long_tracebacks() -> None:
  def _recurse(depth: int) -> None:
    if depth == 0:
      raise RuntimeError("deep failure")
    _recurse(depth - 1)

  try:
    _recurse(10)
  except RuntimeError:
    formatted = TruncatedFormatter().formatException(sys.exc_info())

  assert formatted.startswith("Traceback")
  assert "    ...\n" in formatted
  assert formatted.rstrip().endswith("RuntimeError: deep failure")
