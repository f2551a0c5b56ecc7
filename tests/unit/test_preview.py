from __future__ import annotations

import pytest

from paceflow.text.normalizer import ELLIPSIS, PREVIEW_LENGTH, preview


def test_preview_of_empty_text_is_empty() -> None:
  assert preview("") == ""


def test_preview_removes_markup_and_flattens_whitespace() -> None:
  text = "# Title\n\n> A *quoted* `code` line\n- [link] item_name"
  assert preview(text) == "Title A quoted code line link itemname"


def test_preview_keeps_short_text_without_ellipsis() -> None:
  assert preview("Short text.") == "Short text."


def test_preview_truncates_long_text_with_ellipsis() -> None:
  result = preview("word " * 300)
  assert len(result) == PREVIEW_LENGTH + 1
  assert result.endswith(ELLIPSIS)


@pytest.mark.parametrize("text", ["x" * 10_000, "# Heading\n" * 400, "a  b\n" * 700, ""])
def test_preview_never_exceeds_bound(text: str) -> None:
  assert len(preview(text)) <= PREVIEW_LENGTH + 1


def test_preview_exact_length_is_not_truncated() -> None:
  text = "y" * PREVIEW_LENGTH
  assert preview(text) == text


def test_preview_does_not_split_combining_marks() -> None:
  text = "a" * 499 + "e\u0301" + "zzz"
  assert preview(text) == "a" * 499 + ELLIPSIS


def test_preview_does_not_split_zero_width_joiner_sequences() -> None:
  text = "a" * 498 + "\U0001F469\u200d\U0001F4BB" + "bbb"
  assert preview(text) == "a" * 498 + ELLIPSIS


def test_preview_does_not_split_regional_indicator_flags() -> None:
  text = "a" * 499 + "\U0001F1FA\U0001F1F8" + "zzz"
  assert preview(text) == "a" * 499 + ELLIPSIS


def test_preview_does_not_split_devanagari_syllables() -> None:
  text = "a" * 499 + "\u0915\u093f" + "zzz"
  assert preview(text) == "a" * 499 + ELLIPSIS


def test_preview_does_not_split_hangul_jamo_syllables() -> None:
  text = "a" * 499 + "\u1100\u1161" + "zzz"
  assert preview(text) == "a" * 499 + ELLIPSIS


def test_preview_keeps_whole_cluster_that_ends_on_the_limit() -> None:
  text = "a" * 498 + "\U0001F1FA\U0001F1F8" + "zzz"
  assert preview(text) == "a" * 498 + "\U0001F1FA\U0001F1F8" + ELLIPSIS


def test_preview_custom_length() -> None:
  assert preview("abcdef", max_length=3) == "abc" + ELLIPSIS
  assert preview("abcdef", max_length=0) == ELLIPSIS


def test_preview_rejects_negative_length() -> None:
  with pytest.raises(ValueError):
    preview("abc", max_length=-1)
