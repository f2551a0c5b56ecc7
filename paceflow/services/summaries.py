"""Summary requests for generated documents."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel

from paceflow.core.errors import CollaboratorError
from paceflow.schema.documents import Document
from paceflow.services.client import GenerationServiceClient
from paceflow.text.normalizer import normalize

logger = logging.getLogger(__name__)

SummaryStyle = Literal["linkedin"]
SUPPORTED_STYLES: tuple[str, ...] = ("linkedin",)
SUMMARY_FAILURE_MESSAGE = "Failed to generate summary."


class Summary(BaseModel):
  """Outcome of one summarization request."""

  document_id: str
  style: SummaryStyle
  summary: str
  succeeded: bool


class SummaryRequester:
  """Send normalized document text to the summarization collaborator."""

  def __init__(self, client: GenerationServiceClient) -> None:
    self._client = client

  async def summarize(self, document: Document, *, style: SummaryStyle = "linkedin") -> Summary:
    """Summarize `document`; collaborator failures yield the generic failure message."""
    if style not in SUPPORTED_STYLES:
      raise ValueError(f"Unsupported summary style {style!r}.")

    text = normalize(document.raw_content)
    try:
      summary = await self._client.summarize(text, style=style)
    except CollaboratorError as exc:
      logger.warning("Summarization failed for document %s: %s", document.id, exc)
      summary = None

    if summary is None:
      return Summary(document_id=document.id, style=style, summary=SUMMARY_FAILURE_MESSAGE, succeeded=False)
    return Summary(document_id=document.id, style=style, summary=summary, succeeded=True)
