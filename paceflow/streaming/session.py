"""Job session state for one generation request."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from paceflow.schema.documents import Document

# Cosmetic only: the generation service makes no promise about how many steps a job emits.
EXPECTED_PROGRESS_STEPS = 10

FailureKind = Literal["validation", "transport", "payload"]

VALIDATION_FAILURE_MESSAGE = "Please enter a topic."
TRANSPORT_FAILURE_MESSAGE = "Streaming error. Try again."
PAYLOAD_FAILURE_MESSAGE = "The generation service sent a document that could not be read. Try again."


class SessionState(str, Enum):
  """Lifecycle states of a job session."""

  IDLE = "idle"
  STREAMING = "streaming"
  COMPLETED = "completed"
  FAILED = "failed"
  CANCELLED = "cancelled"


SETTLED_STATES = frozenset({SessionState.COMPLETED, SessionState.FAILED, SessionState.CANCELLED})


@dataclass(frozen=True)
class SessionFailure:
  """Why a session failed."""

  kind: FailureKind
  reason: str
  detail: str | None = None


class SessionSnapshot(BaseModel):
  """Read-only view of a session for observers and API responses."""

  session_id: str
  topic: str
  state: SessionState
  progress: list[str]
  progress_ratio: float
  document_id: str | None = None
  document_title: str | None = None
  failure_kind: FailureKind | None = None
  failure_reason: str | None = None
  started_at: datetime | None = None


@dataclass(eq=False)
class JobSession:
  """Mutable state of one submission, driven only by its StreamController."""

  generation: int
  topic: str
  session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
  state: SessionState = SessionState.IDLE
  progress: list[str] = field(default_factory=list)
  document: Document | None = None
  failure: SessionFailure | None = None
  started_at: datetime | None = None
  _settled: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

  @property
  def is_settled(self) -> bool:
    return self.state in SETTLED_STATES

  def mark_streaming(self) -> None:
    self._require(SessionState.IDLE)
    self.state = SessionState.STREAMING
    self.started_at = datetime.now(timezone.utc)

  def append_progress(self, message: str) -> None:
    self._require(SessionState.STREAMING)
    self.progress.append(message)

  def complete(self, document: Document) -> None:
    self._require(SessionState.STREAMING)
    self.document = document
    self._settle(SessionState.COMPLETED)

  def fail(self, kind: FailureKind, reason: str, *, detail: str | None = None) -> None:
    if self.is_settled:
      raise RuntimeError(f"Session {self.session_id} already settled as {self.state.value}.")
    self.failure = SessionFailure(kind=kind, reason=reason, detail=detail)
    self._settle(SessionState.FAILED)

  def cancel(self) -> bool:
    """Mark an unsettled session as cancelled; returns False when already settled."""
    if self.is_settled:
      return False
    self._settle(SessionState.CANCELLED)
    return True

  def progress_ratio(self, expected_steps: int = EXPECTED_PROGRESS_STEPS) -> float:
    """Approximate completion ratio for progress bars.

    The ratio assumes `expected_steps` progress messages per job. It is a
    display hint only and says nothing about how close the job really is to
    finishing.
    """
    if self.state is SessionState.COMPLETED:
      return 1.0
    if expected_steps <= 0:
      return 0.0
    return min(len(self.progress) / expected_steps, 1.0)

  async def wait(self) -> JobSession:
    """Wait until the session completes, fails or is cancelled."""
    await self._settled.wait()
    return self

  def snapshot(self) -> SessionSnapshot:
    failure = self.failure
    document = self.document
    return SessionSnapshot(
      session_id=self.session_id,
      topic=self.topic,
      state=self.state,
      progress=list(self.progress),
      progress_ratio=round(self.progress_ratio(), 4),
      document_id=document.id if document else None,
      document_title=document.display_title if document else None,
      failure_kind=failure.kind if failure else None,
      failure_reason=failure.reason if failure else None,
      started_at=self.started_at,
    )

  def _require(self, expected: SessionState) -> None:
    if self.state is not expected:
      raise RuntimeError(f"Session {self.session_id} is {self.state.value}, expected {expected.value}.")

  def _settle(self, state: SessionState) -> None:
    self.state = state
    self._settled.set()
