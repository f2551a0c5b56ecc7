"""Client-side cache of previously generated documents."""

from __future__ import annotations

import logging

from paceflow.schema.documents import Document
from paceflow.services.client import GenerationServiceClient
from paceflow.streaming.session import JobSession, SessionState

logger = logging.getLogger(__name__)


class DocumentStore:
  """Hold the document list most-recent-first.

  The collaborator lists documents oldest-first; `refresh` reverses that order.
  Each refresh overwrites the cache (last fetch wins); a failed refresh leaves
  the previous contents untouched.
  """

  def __init__(self, client: GenerationServiceClient) -> None:
    self._client = client
    self._documents: list[Document] = []
    self._loaded = False

  @property
  def documents(self) -> list[Document]:
    return list(self._documents)

  @property
  def loaded(self) -> bool:
    return self._loaded

  async def refresh(self) -> list[Document]:
    """Fetch the listing and replace the cache; raises CollaboratorError on failure."""
    fetched = await self._client.list_documents()
    self._documents = list(reversed(fetched))
    self._loaded = True
    logger.info("Loaded %d documents", len(self._documents))
    return self.documents

  def get(self, document_id: str) -> Document | None:
    for document in self._documents:
      if document.id == document_id:
        return document
    return None

  def remember(self, document: Document) -> None:
    """Put a freshly completed document at the top of the cache."""
    self._documents = [document] + [existing for existing in self._documents if existing.id != document.id]

  def on_session_change(self, session: JobSession) -> None:
    """Session listener adding completed documents to the cache."""
    if session.state is SessionState.COMPLETED and session.document is not None:
      self.remember(session.document)
