"""Placeholder substitution for generated Markdown."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

AUTHOR_NAME = "PaceFlow"

_AUTHOR_PLACEHOLDER = re.compile(re.escape("[Author Name]"), re.IGNORECASE)
_DATE_PLACEHOLDER = re.compile(re.escape("[Date]"), re.IGNORECASE)


def today_utc() -> date:
  """Return the current UTC calendar date."""
  return datetime.now(timezone.utc).date()


def inject(content: str, *, today: date | None = None, author_name: str = AUTHOR_NAME) -> str:
  """Replace ``[Author Name]`` and ``[Date]`` placeholders, case-insensitively.

  Text outside the two bracketed tokens is returned unchanged. ``today``
  defaults to the current UTC date and is rendered as ``YYYY-MM-DD``.
  """
  stamp = (today or today_utc()).isoformat()
  # Callables keep the replacement literal (no backslash group expansion).
  content = _AUTHOR_PLACEHOLDER.sub(lambda _match: author_name, content)
  return _DATE_PLACEHOLDER.sub(lambda _match: stamp, content)
