import logging

from fastapi import APIRouter, Depends, Response

from paceflow.api.deps import get_document_store, get_exporter, get_summary_requester, require_document
from paceflow.api.models import DocumentCard, DocumentDetailResponse, DocumentListResponse
from paceflow.core.errors import CollaboratorError
from paceflow.services.documents import DocumentStore
from paceflow.services.export import DocumentExporter
from paceflow.services.summaries import Summary, SummaryRequester

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=DocumentListResponse)
async def list_documents(store: DocumentStore = Depends(get_document_store)) -> DocumentListResponse:  # noqa: B008
  """Refresh and return documents most-recent-first."""
  error = None
  try:
    documents = await store.refresh()
  except CollaboratorError as exc:
    # Keep serving what was loaded before; the failure is reported alongside.
    logger.warning("Document refresh failed: %s", exc)
    documents = store.documents
    error = "Could not load articles. Try again."
  return DocumentListResponse(documents=[DocumentCard.from_document(document) for document in documents], error=error)


@router.get("/{document_id}", response_model=DocumentDetailResponse)
async def get_document(document_id: str, store: DocumentStore = Depends(get_document_store)) -> DocumentDetailResponse:  # noqa: B008
  """Return one cached document with normalized content."""
  return DocumentDetailResponse.from_document(require_document(store, document_id))


@router.post("/{document_id}/summary", response_model=Summary)
async def summarize_document(document_id: str, store: DocumentStore = Depends(get_document_store), requester: SummaryRequester = Depends(get_summary_requester)) -> Summary:  # noqa: B008
  """Request a LinkedIn-style summary of one document."""
  document = require_document(store, document_id)
  return await requester.summarize(document, style="linkedin")


@router.get("/{document_id}/export")
async def export_document(document_id: str, store: DocumentStore = Depends(get_document_store), exporter: DocumentExporter = Depends(get_exporter)) -> Response:  # noqa: B008
  """Download one document as a file named after its identifier."""
  artifact = exporter.build(require_document(store, document_id))
  return Response(content=artifact.content, media_type=artifact.media_type, headers={"content-disposition": f'attachment; filename="{artifact.filename}"'})
