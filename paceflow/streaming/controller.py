"""Streaming job controller.

Why:
  - A generation request is observed through a long-lived feed that interleaves
    progress text with one terminal message carrying the finished document.
  - A new submission may arrive while an older feed is still delivering; the
    older session must never mutate state once it has been superseded.

How:
  - Every session gets a generation token. The pump task passes its token with
    each decoded frame to `handle_frame`, which drops frames whose token is no
    longer the active one.
  - The controller owns the single open feed connection and releases it before
    any terminal transition, so no code path leaves a connection behind.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from collections.abc import Callable

from paceflow.core.errors import PayloadError, TransportError, ValidationError
from paceflow.streaming.feed import FeedConnection, FeedFactory
from paceflow.streaming.frames import Frame, ProgressFrame, decode_frame
from paceflow.streaming.session import PAYLOAD_FAILURE_MESSAGE, TRANSPORT_FAILURE_MESSAGE, VALIDATION_FAILURE_MESSAGE, FailureKind, JobSession, SessionState

logger = logging.getLogger(__name__)

SessionListener = Callable[[JobSession], None]


class StreamController:
  """Drive one generation session at a time over an incremental feed."""

  def __init__(self, feed_factory: FeedFactory) -> None:
    self._feed_factory = feed_factory
    self._generations = itertools.count(1)
    self._active_generation: int | None = None
    self._session = JobSession(generation=0, topic="")
    self._connection: FeedConnection | None = None
    self._pump_task: asyncio.Task[None] | None = None
    self._listeners: list[SessionListener] = []

  @property
  def session(self) -> JobSession:
    """Return the most recent session (an idle placeholder before the first start)."""
    return self._session

  def subscribe(self, listener: SessionListener) -> Callable[[], None]:
    """Register a listener called after every state change of the active session."""
    self._listeners.append(listener)

    def _unsubscribe() -> None:
      with contextlib.suppress(ValueError):
        self._listeners.remove(listener)

    return _unsubscribe

  async def start(self, topic: str) -> JobSession:
    """Cancel any running session and begin streaming a new one for `topic`.

    Raises:
      ValidationError: `topic` is blank; the feed is never opened.
    """
    generation = next(self._generations)
    session = JobSession(generation=generation, topic=topic.strip())
    # Claim the generation before the first await so overlapping starts resolve to the latest one.
    stale_task, stale_connection = self._supersede(generation, session)
    await self._teardown(stale_task, stale_connection)
    if not self._is_active(generation):
      session.cancel()
      return session

    if not session.topic:
      session.fail("validation", VALIDATION_FAILURE_MESSAGE)
      self._active_generation = None
      self._notify(session)
      raise ValidationError(VALIDATION_FAILURE_MESSAGE)

    session.mark_streaming()
    self._notify(session)
    logger.info("Starting generation session %s generation=%s", session.session_id, generation)

    try:
      connection = await self._feed_factory(session.topic)
    except TransportError as exc:
      if self._is_active(generation):
        self._fail(session, "transport", TRANSPORT_FAILURE_MESSAGE, detail=str(exc))
      return session
    except Exception as exc:
      # Never leave a session streaming without a connection.
      if self._is_active(generation):
        self._fail(session, "transport", TRANSPORT_FAILURE_MESSAGE, detail=str(exc))
      raise

    # Superseded while the connection was being established.
    if not self._is_active(generation):
      await connection.aclose()
      session.cancel()
      return session

    self._connection = connection
    self._pump_task = asyncio.create_task(self._pump(generation, connection), name=f"paceflow-feed-{session.session_id}")
    return session

  async def handle_frame(self, generation: int, frame: Frame) -> bool:
    """Apply one decoded frame to the session identified by `generation`.

    Returns True while the session still accepts frames. Frames from a
    superseded or settled session are dropped without touching state.
    """
    if not self._is_active(generation):
      logger.debug("Dropping frame from superseded session generation=%s", generation)
      return False
    session = self._session
    if session.state is not SessionState.STREAMING:
      return False

    if isinstance(frame, ProgressFrame):
      session.append_progress(frame.text)
      self._notify(session)
      return True

    await self._release_connection()
    if not self._is_active(generation):
      return False
    session.complete(frame.document)
    self._active_generation = None
    logger.info("Session %s completed with document %s after %d progress messages", session.session_id, frame.document.id, len(session.progress))
    self._notify(session)
    return False

  async def cancel(self) -> None:
    """Cancel the running session, if any, and release its connection."""
    task, connection = self._supersede(None, self._session)
    await self._teardown(task, connection)

  async def aclose(self) -> None:
    """Tear the controller down; no listener is called afterwards."""
    await self.cancel()
    self._listeners.clear()

  def _supersede(self, generation: int | None, session: JobSession) -> tuple[asyncio.Task[None] | None, FeedConnection | None]:
    """Install `session` under `generation`, cancel the previous one and detach its resources.

    Runs without suspending, so a concurrent `start` or `cancel` always sees a
    consistent active generation.
    """
    previous = self._session
    self._active_generation = generation
    self._session = session
    if previous.state is SessionState.STREAMING and previous.cancel():
      logger.info("Cancelled generation session %s", previous.session_id)
    task, self._pump_task = self._pump_task, None
    connection, self._connection = self._connection, None
    return task, connection

  async def _teardown(self, task: asyncio.Task[None] | None, connection: FeedConnection | None) -> None:
    if task is not None and task is not asyncio.current_task() and not task.done():
      task.cancel()
      with contextlib.suppress(asyncio.CancelledError):
        await task
    if connection is not None:
      await connection.aclose()

  async def _pump(self, generation: int, connection: FeedConnection) -> None:
    try:
      async for message in connection.messages():
        try:
          frame = decode_frame(message)
        except PayloadError as exc:
          await self._fail_active(generation, "payload", PAYLOAD_FAILURE_MESSAGE, detail=str(exc))
          return
        if not await self.handle_frame(generation, frame):
          return
    except TransportError as exc:
      await self._fail_active(generation, "transport", TRANSPORT_FAILURE_MESSAGE, detail=str(exc))
      return
    except Exception as exc:
      logger.exception("Feed pump crashed for generation=%s", generation)
      await self._fail_active(generation, "transport", TRANSPORT_FAILURE_MESSAGE, detail=str(exc))
      return
    finally:
      await connection.aclose()

    # The server closed the feed before sending a terminal message.
    await self._fail_active(generation, "transport", TRANSPORT_FAILURE_MESSAGE, detail="Feed ended without a terminal message.")

  async def _fail_active(self, generation: int, kind: FailureKind, reason: str, *, detail: str) -> None:
    if not self._is_active(generation):
      return
    await self._release_connection()
    if not self._is_active(generation):
      return
    self._fail(self._session, kind, reason, detail=detail)

  def _fail(self, session: JobSession, kind: FailureKind, reason: str, *, detail: str | None = None) -> None:
    session.fail(kind, reason, detail=detail)
    self._active_generation = None
    logger.warning("Session %s failed kind=%s detail=%s", session.session_id, kind, detail)
    self._notify(session)

  async def _release_connection(self) -> None:
    connection, self._connection = self._connection, None
    if connection is not None:
      await connection.aclose()

  def _is_active(self, generation: int) -> bool:
    return self._active_generation is not None and generation == self._active_generation

  def _notify(self, session: JobSession) -> None:
    for listener in list(self._listeners):
      try:
        listener(session)
      except Exception:  # noqa: BLE001
        logger.exception("Session listener %r failed", listener)
