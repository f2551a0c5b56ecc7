"""Server-sent event feed transport for generation jobs."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Protocol

import httpx

from paceflow.core.errors import TransportError

logger = logging.getLogger(__name__)

FEED_PATH = "/generate-blog-stream"
DEFAULT_EVENT_TYPE = "message"


class FeedConnection(Protocol):
  """One open incremental feed owned by a single session."""

  def messages(self) -> AsyncIterator[str]:
    """Yield raw message strings in arrival order."""
    ...

  async def aclose(self) -> None:
    """Release the connection; calling it again is a no-op."""
    ...


FeedFactory = Callable[[str], Awaitable[FeedConnection]]


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
  """Yield the data payload of each default-type server-sent event.

  Multi-line data fields are joined with newlines, comment lines are skipped
  and events with an explicit non-default type are ignored.
  """
  data_lines: list[str] = []
  event_type = DEFAULT_EVENT_TYPE
  async for raw_line in lines:
    line = raw_line.rstrip("\r")
    # A blank line dispatches the buffered event.
    if not line:
      if data_lines and event_type == DEFAULT_EVENT_TYPE:
        yield "\n".join(data_lines)
      data_lines = []
      event_type = DEFAULT_EVENT_TYPE
      continue
    if line.startswith(":"):
      continue
    field, _, value = line.partition(":")
    if value.startswith(" "):
      value = value[1:]
    if field == "data":
      data_lines.append(value)
    elif field == "event":
      event_type = value or DEFAULT_EVENT_TYPE
  # Flush an event left unterminated at end of stream.
  if data_lines and event_type == DEFAULT_EVENT_TYPE:
    yield "\n".join(data_lines)


class HttpFeed:
  """Feed connection backed by a streaming httpx response."""

  def __init__(self, response: httpx.Response) -> None:
    self._response = response
    self._closed = False

  @property
  def closed(self) -> bool:
    return self._closed

  @classmethod
  async def open(cls, client: httpx.AsyncClient, topic: str, *, connect_timeout: float) -> HttpFeed:
    """Open the feed for `topic`; raises TransportError when the server cannot be reached."""
    # No read timeout: a stalled feed stays open until the caller cancels it.
    timeout = httpx.Timeout(connect_timeout, read=None)
    request = client.build_request("GET", FEED_PATH, params={"topic": topic}, headers={"accept": "text/event-stream", "cache-control": "no-cache"}, timeout=timeout)
    try:
      response = await client.send(request, stream=True)
    except httpx.RequestError as exc:
      logger.warning("Failed to open generation feed: %s", exc)
      raise TransportError(f"Could not connect to the generation feed: {exc}") from exc

    if response.is_error:
      status_code = response.status_code
      await response.aclose()
      logger.warning("Generation feed returned HTTP %s", status_code)
      raise TransportError(f"Generation feed returned HTTP {status_code}.")

    return cls(response)

  async def messages(self) -> AsyncIterator[str]:
    try:
      async for data in iter_sse_data(self._response.aiter_lines()):
        yield data
    except (httpx.HTTPError, httpx.StreamError) as exc:
      if self._closed:
        return
      raise TransportError(f"Generation feed failed: {exc}") from exc

  async def aclose(self) -> None:
    if self._closed:
      return
    self._closed = True
    await self._response.aclose()

