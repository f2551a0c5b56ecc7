"""Optional .env support for local runs.

Only ``PACEFLOW_`` variables are read so a shared .env file cannot leak
unrelated settings into the process.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_PREFIX = "PACEFLOW_"


def default_env_path() -> Path:
  """Return the .env path at the project root."""

  return Path(__file__).resolve().parents[2] / ".env"


def _parse_assignment(raw_line: str) -> tuple[str, str] | None:
  line = raw_line.strip()
  if not line or line.startswith("#"):
    return None
  line = line.removeprefix("export ").lstrip()
  name, sep, value = line.partition("=")
  name = name.strip()
  if not sep or not name.startswith(ENV_PREFIX):
    return None
  value = value.strip()
  # Matching outer quotes are dropped; inner text is kept verbatim.
  if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
    value = value[1:-1]
  return name, value


def load_env_file(path: Path, *, override: bool = False) -> dict[str, str]:
  """Apply ``PACEFLOW_*`` assignments from `path`; returns the variables that were set."""

  if not path.is_file():
    return {}

  applied: dict[str, str] = {}
  for raw_line in path.read_text(encoding="utf-8").splitlines():
    assignment = _parse_assignment(raw_line)
    if assignment is None:
      continue
    name, value = assignment
    if name in os.environ and not override:
      continue
    os.environ[name] = value
    applied[name] = value
  return applied
