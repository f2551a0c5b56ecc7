"""Deterministic cleanup of generated Markdown before display, export or summary.

How:
  - `normalize` runs a fixed sequence of line-oriented passes; the order matters
    because heading deduplication must see the document after the preamble is
    gone, and blank-line collapsing must run after lines have been removed.
  - `preview` flattens a normalized document into a bounded single line.
"""

from __future__ import annotations

import re
from datetime import date

import regex

from paceflow.text.metadata import inject

PREVIEW_LENGTH = 500
ELLIPSIS = "…"

TOP_LEVEL_HEADING_PREFIX = "# "
NOISE_LINE_PREFIX = "generated"
NOISE_LINE_LABELS = frozenset({"hide"})
MIN_COLLAPSED_BLANK_RUN = 3

_MARKUP_CHARS = re.compile(r"[#_*`>\-\[\]]")
_WHITESPACE_RUN = re.compile(r"\s+")
_GRAPHEME_CLUSTER = regex.compile(r"\X")


def _is_top_level_heading(line: str) -> bool:
  return line.startswith(TOP_LEVEL_HEADING_PREFIX)


def _strip_preamble(lines: list[str]) -> list[str]:
  for index, line in enumerate(lines):
    if _is_top_level_heading(line):
      return lines[index:]
  return lines


def _is_noise(line: str) -> bool:
  stripped = line.strip().lower()
  return stripped.startswith(NOISE_LINE_PREFIX) or stripped in NOISE_LINE_LABELS


def _dedupe_top_level_headings(lines: list[str]) -> list[str]:
  seen: set[str] = set()
  kept: list[str] = []
  for line in lines:
    if _is_top_level_heading(line):
      key = line.strip()
      if key in seen:
        continue
      seen.add(key)
    kept.append(line)
  return kept


def _flush_blank_run(collapsed: list[str], run: list[str]) -> None:
  if len(run) >= MIN_COLLAPSED_BLANK_RUN:
    collapsed.append("")
  else:
    collapsed.extend(run)


def _collapse_blank_runs(lines: list[str]) -> list[str]:
  collapsed: list[str] = []
  run: list[str] = []
  for line in lines:
    if not line.strip():
      run.append(line)
      continue
    _flush_blank_run(collapsed, run)
    run = []
    collapsed.append(line)
  _flush_blank_run(collapsed, run)
  return collapsed


def normalize(raw: str, *, today: date | None = None) -> str:
  """Return the canonical form of a generated document.

  Steps, in order: trim, drop the preamble before the first ``# `` heading,
  drop noise lines, drop repeated top-level headings (exact match after
  trimming), collapse 3+ blank lines into one, then inject metadata.
  """
  lines = raw.replace("\r\n", "\n").strip().split("\n")
  lines = _strip_preamble(lines)
  lines = [line for line in lines if not _is_noise(line)]
  lines = _dedupe_top_level_headings(lines)
  lines = _collapse_blank_runs(lines)
  return inject("\n".join(lines), today=today)


def _safe_cut(text: str, limit: int) -> str:
  """Cut `text` to at most `limit` code points on an extended grapheme cluster boundary."""
  end = 0
  for match in _GRAPHEME_CLUSTER.finditer(text):
    if match.end() > limit:
      break
    end = match.end()
  return text[:end]


def preview(normalized: str, max_length: int = PREVIEW_LENGTH) -> str:
  """Flatten a document into a single line of at most `max_length` characters plus an ellipsis."""
  if max_length < 0:
    raise ValueError("max_length must be zero or positive.")
  cleaned = _MARKUP_CHARS.sub("", normalized)
  cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip()
  if len(cleaned) <= max_length:
    return cleaned
  return _safe_cut(cleaned, max_length) + ELLIPSIS
