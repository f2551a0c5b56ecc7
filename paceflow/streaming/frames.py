"""Decoding of raw feed messages into tagged frames."""

from __future__ import annotations

import json
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from paceflow.core.errors import PayloadError
from paceflow.schema.documents import Document

TERMINAL_PREFIX = "DONE::"


@dataclass(frozen=True)
class ProgressFrame:
  """A human-readable progress step emitted while the job runs."""

  text: str


@dataclass(frozen=True)
class TerminalFrame:
  """The single completion frame carrying the finished document."""

  document: Document


Frame = ProgressFrame | TerminalFrame


def decode_frame(message: str) -> Frame:
  """Classify a raw feed message, decoding the document of a terminal message.

  Raises:
    PayloadError: the message carries the terminal prefix but the remainder is
      not a JSON object matching the document shape.
  """
  if not message.startswith(TERMINAL_PREFIX):
    return ProgressFrame(text=message)

  body = message[len(TERMINAL_PREFIX) :]
  try:
    payload = json.loads(body)
  except json.JSONDecodeError as exc:
    raise PayloadError(f"Terminal message is not valid JSON: {exc.msg}") from exc

  if not isinstance(payload, dict):
    raise PayloadError(f"Terminal message must be a JSON object, got {type(payload).__name__}.")

  try:
    document = Document.from_wire(payload)
  except PydanticValidationError as exc:
    fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
    raise PayloadError(f"Terminal message does not match the document shape ({fields}).") from exc

  return TerminalFrame(document=document)
