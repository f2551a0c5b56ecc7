from __future__ import annotations

from pathlib import Path

import pytest

from paceflow.core.errors import CollaboratorError
from paceflow.schema.documents import Document
from paceflow.services.export import DocumentExporter, export_filename


class BrokenRenderer:
  extension = "pdf"
  media_type = "application/pdf"

  def render(self, document: Document, normalized: str) -> bytes:
    raise RuntimeError("renderer crashed")


class RecordingRenderer:
  extension = ".png"
  media_type = "image/png"

  def __init__(self) -> None:
    self.normalized: list[str] = []

  def render(self, document: Document, normalized: str) -> bytes:
    self.normalized.append(normalized)
    return b"\x89PNG"


def test_export_filename_is_deterministic_and_safe() -> None:
  assert export_filename("abc123", "md") == "blog-abc123.md"
  assert export_filename("a/b c", "pdf") == "blog-a_b_c.pdf"
  assert export_filename("../..", ".md") == "blog-document.md"


def test_build_renders_normalized_markdown_by_default(wire_document) -> None:
  artifact = DocumentExporter().build(Document.from_wire(wire_document))

  assert artifact.filename == "blog-doc-1.md"
  assert artifact.media_type.startswith("text/markdown")
  text = artifact.content.decode("utf-8")
  assert text.startswith("# Remote work\nBy PaceFlow on ")
  assert text.endswith("Body for doc-1.\n")


def test_build_hands_normalized_text_to_renderer(wire_document) -> None:
  renderer = RecordingRenderer()
  artifact = DocumentExporter(renderer).build(Document.from_wire(wire_document))

  assert artifact.filename == "blog-doc-1.png"
  assert artifact.content == b"\x89PNG"
  assert renderer.normalized[0].startswith("# Remote work")


def test_renderer_failure_is_collaborator_error(wire_document) -> None:
  with pytest.raises(CollaboratorError, match="Failed to render"):
    DocumentExporter(BrokenRenderer()).build(Document.from_wire(wire_document))


def test_write_creates_directory_and_file(tmp_path: Path, wire_document) -> None:
  target = DocumentExporter().write(Document.from_wire(wire_document), tmp_path / "exports")

  assert target == tmp_path / "exports" / "blog-doc-1.md"
  assert target.read_text(encoding="utf-8").startswith("# Remote work")


def test_write_failure_is_collaborator_error(tmp_path: Path, wire_document) -> None:
  blocker = tmp_path / "not-a-dir"
  blocker.write_text("file", encoding="utf-8")
  with pytest.raises(CollaboratorError, match="Failed to write"):
    DocumentExporter().write(Document.from_wire(wire_document), blocker)
