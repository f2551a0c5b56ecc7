"""HTTP client for the remote generation service."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from paceflow.config import Settings
from paceflow.core.errors import CollaboratorError
from paceflow.schema.documents import Document
from paceflow.streaming.feed import FeedConnection, HttpFeed

logger = logging.getLogger(__name__)

LIST_PATH = "/blogs"
SUMMARIZE_PATH = "/summarize"


class GenerationServiceClient:
  """Thin wrapper over httpx for every call made to the generation service."""

  def __init__(self, client: httpx.AsyncClient, *, timeout: float) -> None:
    self._client = client
    self._timeout = timeout

  @classmethod
  def from_settings(cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> GenerationServiceClient:
    """Build a client for the configured base URL."""
    client = httpx.AsyncClient(base_url=settings.api_base_url, timeout=settings.request_timeout_seconds, transport=transport)
    return cls(client, timeout=settings.request_timeout_seconds)

  @property
  def base_url(self) -> str:
    return str(self._client.base_url)

  async def open_feed(self, topic: str) -> FeedConnection:
    """Open the generation feed for `topic`."""
    return await HttpFeed.open(self._client, topic, connect_timeout=self._timeout)

  async def list_documents(self) -> list[Document]:
    """Fetch every stored document in the collaborator's order (oldest first)."""
    payload = await self._request_json("GET", LIST_PATH)
    if not isinstance(payload, list):
      raise CollaboratorError(f"Document listing returned {type(payload).__name__}, expected a list.")
    try:
      return [Document.from_wire(item) for item in payload]
    except PydanticValidationError as exc:
      logger.warning("Document listing contained malformed entries: %s", exc.errors())
      raise CollaboratorError("Document listing contained malformed documents.") from exc

  async def summarize(self, text: str, *, style: str) -> str | None:
    """Request a summary; returns None when the response carries no summary."""
    payload = await self._request_json("POST", SUMMARIZE_PATH, json={"text": text, "style": style})
    if not isinstance(payload, dict):
      raise CollaboratorError(f"Summarization returned {type(payload).__name__}, expected an object.")
    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
      return None
    return summary

  async def aclose(self) -> None:
    await self._client.aclose()

  async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
    try:
      response = await self._client.request(method, path, **kwargs)
      response.raise_for_status()
    except httpx.HTTPStatusError as exc:
      logger.error("%s %s returned %s: %s", method, path, exc.response.status_code, exc.response.text[:200])
      raise CollaboratorError(f"{method} {path} returned HTTP {exc.response.status_code}.", status_code=exc.response.status_code) from exc
    except httpx.RequestError as exc:
      logger.error("%s %s failed: %s", method, path, exc)
      raise CollaboratorError(f"{method} {path} failed: {exc}") from exc

    try:
      return response.json()
    except ValueError as exc:
      raise CollaboratorError(f"{method} {path} returned a non-JSON body.") from exc
