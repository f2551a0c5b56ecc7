"""Shared fixtures: an in-memory feed, a feed factory and sample wire documents."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest

_END = object()


class FakeFeed:
  """In-memory feed connection driven by the test through a queue."""

  def __init__(self) -> None:
    self._queue: asyncio.Queue[object] = asyncio.Queue()
    self.closed = False
    self.close_count = 0
    self.aclose_calls = 0

  def push(self, *messages: str) -> None:
    for message in messages:
      self._queue.put_nowait(message)

  def fail(self, exc: BaseException) -> None:
    self._queue.put_nowait(exc)

  def end(self) -> None:
    self._queue.put_nowait(_END)

  async def messages(self) -> AsyncIterator[str]:
    while True:
      item = await self._queue.get()
      if item is _END:
        return
      if isinstance(item, BaseException):
        raise item
      yield item

  async def aclose(self) -> None:
    self.aclose_calls += 1
    if self.closed:
      return
    self.closed = True
    self.close_count += 1


class FakeFeedFactory:
  """Feed factory recording requested topics and handing out FakeFeeds."""

  def __init__(self) -> None:
    self.topics: list[str] = []
    self.feeds: list[FakeFeed] = []
    self.error: BaseException | None = None

  async def __call__(self, topic: str) -> FakeFeed:
    self.topics.append(topic)
    if self.error is not None:
      raise self.error
    feed = FakeFeed()
    self.feeds.append(feed)
    return feed

  @property
  def last(self) -> FakeFeed:
    return self.feeds[-1]


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def feed_factory() -> FakeFeedFactory:
  return FakeFeedFactory()


def make_wire_document(document_id: str = "doc-1", *, topic: str = "Remote work", created_at: str = "2024-05-01T09:30:00Z", title: str | None = "Working Remotely", final_post: str | None = None) -> dict[str, Any]:
  seo: dict[str, Any] = {"title": title, "description": f"All about {topic.lower()}.", "tags": ["remote", "work", "remote"]}
  return {
    "id": document_id,
    "topic": topic,
    "created_at": created_at,
    "seo": seo,
    "final_post": final_post if final_post is not None else f"Sure! Here is your post.\n# {topic}\nBy [Author Name] on [Date]\n\nBody for {document_id}.",
  }


@pytest.fixture
def wire_document() -> dict[str, Any]:
  return make_wire_document()


@pytest.fixture
def wire_documents() -> list[dict[str, Any]]:
  # Collaborator order: oldest first.
  return [
    make_wire_document("doc-1", topic="First", created_at="2024-05-01T09:00:00Z"),
    make_wire_document("doc-2", topic="Second", created_at="2024-05-02T09:00:00Z"),
    make_wire_document("doc-3", topic="Third", created_at="2024-05-03T09:00:00Z"),
  ]


@pytest.fixture
def make_wire():
  return make_wire_document
