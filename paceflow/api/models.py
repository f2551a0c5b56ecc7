from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from paceflow.schema.documents import Document
from paceflow.text.normalizer import normalize, preview

MAX_TOPIC_CHARS = 2000


class StartSessionRequest(BaseModel):
  """Request payload for starting a generation session."""

  # Blank topics are rejected by the controller so the failure is recorded on the session.
  topic: StrictStr = Field(max_length=MAX_TOPIC_CHARS, description="Free-text topic to generate an article for.", examples=["How do I write a great performance review?"])
  model_config = ConfigDict(extra="forbid")


class DocumentCard(BaseModel):
  """One entry of the most-recent-first document list."""

  id: str
  title: str
  topic: str
  created_at: datetime
  description: str | None = None
  tags: list[str] = Field(default_factory=list)
  preview: str

  @classmethod
  def from_document(cls, document: Document) -> DocumentCard:
    return cls(id=document.id, title=document.display_title, topic=document.topic, created_at=document.created_at, description=document.description, tags=document.tags, preview=preview(normalize(document.raw_content)))


class DocumentListResponse(BaseModel):
  """Document cards plus the error of the last refresh, if it failed."""

  documents: list[DocumentCard]
  error: str | None = None


class DocumentDetailResponse(BaseModel):
  """A single document with its normalized content."""

  id: str
  title: str
  topic: str
  created_at: datetime
  description: str | None = None
  tags: list[str] = Field(default_factory=list)
  content: str

  @classmethod
  def from_document(cls, document: Document) -> DocumentDetailResponse:
    return cls(id=document.id, title=document.display_title, topic=document.topic, created_at=document.created_at, description=document.description, tags=document.tags, content=normalize(document.raw_content))
