"""Shared FastAPI dependencies resolving the components built at startup."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from paceflow.schema.documents import Document
from paceflow.services.documents import DocumentStore
from paceflow.services.export import DocumentExporter
from paceflow.services.summaries import SummaryRequester
from paceflow.streaming.controller import StreamController


def get_controller(request: Request) -> StreamController:
  return request.app.state.controller


def get_document_store(request: Request) -> DocumentStore:
  return request.app.state.document_store


def get_summary_requester(request: Request) -> SummaryRequester:
  return request.app.state.summary_requester


def get_exporter(request: Request) -> DocumentExporter:
  return request.app.state.exporter


def require_document(store: DocumentStore, document_id: str) -> Document:
  """Return a cached document or raise 404."""
  document = store.get(document_id)
  if document is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Document {document_id} not found.")
  return document
