from __future__ import annotations

import re
from datetime import date

from paceflow.text.metadata import AUTHOR_NAME, inject

TODAY = date(2024, 5, 1)


def test_inject_replaces_author_and_date() -> None:
  assert inject("By [Author Name] on [Date].", today=TODAY) == "By PaceFlow on 2024-05-01."


def test_inject_is_case_insensitive_and_replaces_every_occurrence() -> None:
  content = "[author name], [AUTHOR NAME] and [Author Name] wrote this on [date] / [DATE]."
  assert inject(content, today=TODAY) == "PaceFlow, PaceFlow and PaceFlow wrote this on 2024-05-01 / 2024-05-01."


def test_inject_leaves_text_without_placeholders_untouched() -> None:
  content = "# Title\n\nAuthor Name and Date without brackets, [Author] and [Dates]."
  assert inject(content, today=TODAY) == content


def test_inject_is_idempotent() -> None:
  once = inject("[Author Name] - [Date]", today=TODAY)
  assert inject(once, today=TODAY) == once


def test_inject_keeps_replacement_literal() -> None:
  assert inject("[Author Name]", author_name=r"Team \1 & co") == r"Team \1 & co"


def test_inject_defaults_to_an_iso_date() -> None:
  result = inject("[Date]")
  assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", result)
  assert AUTHOR_NAME == "PaceFlow"
