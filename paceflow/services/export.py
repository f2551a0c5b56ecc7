"""Export of a displayed document into a single downloadable file."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from paceflow.core.errors import CollaboratorError
from paceflow.schema.documents import Document
from paceflow.text.normalizer import normalize

logger = logging.getLogger(__name__)

EXPORT_FILENAME_PREFIX = "blog"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class DocumentRenderer(Protocol):
  """Turns a document into the bytes of a visual representation (PDF, image, ...)."""

  extension: str
  media_type: str

  def render(self, document: Document, normalized: str) -> bytes:
    """Render `document` whose normalized Markdown is `normalized`."""
    ...


class MarkdownRenderer:
  """Default renderer that exports the normalized Markdown itself."""

  extension = "md"
  media_type = "text/markdown; charset=utf-8"

  def render(self, document: Document, normalized: str) -> bytes:
    return (normalized.rstrip("\n") + "\n").encode("utf-8")


@dataclass(frozen=True)
class ExportArtifact:
  """One rendered export ready to be downloaded or written."""

  filename: str
  media_type: str
  content: bytes


def export_filename(document_id: str, extension: str) -> str:
  """Return the deterministic export filename for a document identifier."""
  safe_id = _UNSAFE_FILENAME_CHARS.sub("_", document_id).strip("._") or "document"
  return f"{EXPORT_FILENAME_PREFIX}-{safe_id}.{extension.lstrip('.')}"


class DocumentExporter:
  """Render documents through a renderer collaborator and name the result."""

  def __init__(self, renderer: DocumentRenderer | None = None) -> None:
    self._renderer = renderer or MarkdownRenderer()

  def build(self, document: Document) -> ExportArtifact:
    """Render `document`; raises CollaboratorError when the renderer fails."""
    normalized = normalize(document.raw_content)
    try:
      content = self._renderer.render(document, normalized)
    except Exception as exc:
      logger.error("Renderer %s failed for document %s", type(self._renderer).__name__, document.id, exc_info=True)
      raise CollaboratorError(f"Failed to render document {document.id}.") from exc
    return ExportArtifact(filename=export_filename(document.id, self._renderer.extension), media_type=self._renderer.media_type, content=content)

  def write(self, document: Document, directory: Path) -> Path:
    """Render `document` and write it into `directory`, returning the file path."""
    artifact = self.build(document)
    target = directory / artifact.filename
    try:
      directory.mkdir(parents=True, exist_ok=True)
      target.write_bytes(artifact.content)
    except OSError as exc:
      raise CollaboratorError(f"Failed to write export to {target}: {exc}") from exc
    logger.info("Exported document %s to %s", document.id, target)
    return target
