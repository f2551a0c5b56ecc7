"""Command-line entry point for generating, browsing, summarizing and exporting articles."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from paceflow.config import Settings, get_settings
from paceflow.core.errors import CollaboratorError, ValidationError
from paceflow.core.logging import initialize_logging
from paceflow.schema.documents import Document
from paceflow.services.client import GenerationServiceClient
from paceflow.services.documents import DocumentStore
from paceflow.services.export import DocumentExporter
from paceflow.services.summaries import SummaryRequester
from paceflow.streaming.controller import StreamController
from paceflow.streaming.session import EXPECTED_PROGRESS_STEPS, JobSession, SessionState
from paceflow.text.normalizer import normalize, preview

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2
LIST_PREVIEW_LENGTH = 160


def _progress_printer() -> Callable[[JobSession], None]:
  """Return a listener printing each progress line once, with the cosmetic percentage."""
  printed = 0

  def _print_progress(session: JobSession) -> None:
    nonlocal printed
    for message in session.progress[printed:]:
      printed += 1
      percent = round(min(printed / EXPECTED_PROGRESS_STEPS, 1.0) * 100)
      print(f"[{percent:>3}%] {message}")

  return _print_progress


async def _generate(settings: Settings, topic: str) -> int:
  client = GenerationServiceClient.from_settings(settings)
  controller = StreamController(client.open_feed)
  controller.subscribe(_progress_printer())
  try:
    try:
      session = await controller.start(topic)
    except ValidationError as exc:
      print(f"ERROR: {exc}", file=sys.stderr)
      return EXIT_INVALID
    await session.wait()
  finally:
    await controller.aclose()
    await client.aclose()

  if session.state is SessionState.COMPLETED and session.document is not None:
    document = session.document
    print()
    print(f"{document.display_title} ({document.id})")
    print(preview(normalize(document.raw_content)))
    return EXIT_OK

  reason = session.failure.reason if session.failure else "Generation did not complete."
  print(f"ERROR: {reason}", file=sys.stderr)
  return EXIT_FAILED


async def _with_store(settings: Settings, action: Callable[[GenerationServiceClient, DocumentStore], Awaitable[int]]) -> int:
  """Run `action` against a freshly refreshed document store."""
  client = GenerationServiceClient.from_settings(settings)
  try:
    store = DocumentStore(client)
    try:
      await store.refresh()
    except CollaboratorError as exc:
      print(f"ERROR: Could not load articles. Try again. ({exc})", file=sys.stderr)
      return EXIT_FAILED
    return await action(client, store)
  finally:
    await client.aclose()


def _lookup(store: DocumentStore, document_id: str) -> Document | None:
  document = store.get(document_id)
  if document is None:
    print(f"ERROR: Document {document_id} not found.", file=sys.stderr)
  return document


async def _list(settings: Settings, limit: int | None) -> int:
  async def _action(_client: GenerationServiceClient, store: DocumentStore) -> int:
    documents = store.documents
    if limit is not None:
      documents = documents[:limit]
    if not documents:
      print("No articles yet.")
    for document in documents:
      print(f"{document.id}  {document.display_date()}  {document.display_title}")
      print(f"    {preview(normalize(document.raw_content), LIST_PREVIEW_LENGTH)}")
    return EXIT_OK

  return await _with_store(settings, _action)


async def _show(settings: Settings, document_id: str) -> int:
  async def _action(_client: GenerationServiceClient, store: DocumentStore) -> int:
    document = _lookup(store, document_id)
    if document is None:
      return EXIT_FAILED
    print(normalize(document.raw_content))
    return EXIT_OK

  return await _with_store(settings, _action)


async def _summarize(settings: Settings, document_id: str) -> int:
  async def _action(client: GenerationServiceClient, store: DocumentStore) -> int:
    document = _lookup(store, document_id)
    if document is None:
      return EXIT_FAILED
    result = await SummaryRequester(client).summarize(document, style="linkedin")
    print(result.summary)
    return EXIT_OK if result.succeeded else EXIT_FAILED

  return await _with_store(settings, _action)


async def _export(settings: Settings, document_id: str, out_dir: Path) -> int:
  async def _action(_client: GenerationServiceClient, store: DocumentStore) -> int:
    document = _lookup(store, document_id)
    if document is None:
      return EXIT_FAILED
    try:
      path = DocumentExporter().write(document, out_dir)
    except CollaboratorError as exc:
      print(f"ERROR: {exc}", file=sys.stderr)
      return EXIT_FAILED
    print(f"Exported: {path}")
    return EXIT_OK

  return await _with_store(settings, _action)


def _serve(host: str, port: int) -> int:
  import uvicorn

  uvicorn.run("paceflow.main:app", host=host, port=port, log_config=None)
  return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(prog="paceflow", description="Generate, browse, summarize and export PaceFlow articles.")
  subparsers = parser.add_subparsers(dest="command", required=True)

  generate = subparsers.add_parser("generate", help="Generate an article and stream its progress.")
  generate.add_argument("topic", help="Free-text topic for the article.")

  listing = subparsers.add_parser("list", help="List articles most recent first.")
  listing.add_argument("--limit", type=int, default=None, help="Show at most this many articles.")

  show = subparsers.add_parser("show", help="Print the normalized article.")
  show.add_argument("document_id")

  summarize = subparsers.add_parser("summarize", help="Print a LinkedIn-style summary of an article.")
  summarize.add_argument("document_id")

  export = subparsers.add_parser("export", help="Write an article to a file.")
  export.add_argument("document_id")
  export.add_argument("--out", type=Path, default=None, help="Output directory (defaults to PACEFLOW_EXPORT_DIR).")

  serve = subparsers.add_parser("serve", help="Run the HTTP API.")
  serve.add_argument("--host", default="127.0.0.1")
  serve.add_argument("--port", type=int, default=8080)
  return parser


def main(argv: list[str] | None = None) -> int:
  """Parse CLI args and run the selected command."""
  args = build_parser().parse_args(argv)
  settings = get_settings()
  initialize_logging(settings)

  if args.command == "serve":
    return _serve(args.host, args.port)
  if args.command == "generate":
    return asyncio.run(_generate(settings, args.topic))
  if args.command == "list":
    if args.limit is not None and args.limit <= 0:
      print("ERROR: --limit must be a positive integer when provided.", file=sys.stderr)
      return EXIT_INVALID
    return asyncio.run(_list(settings, args.limit))
  if args.command == "show":
    return asyncio.run(_show(settings, args.document_id))
  if args.command == "summarize":
    return asyncio.run(_summarize(settings, args.document_id))
  return asyncio.run(_export(settings, args.document_id, args.out or settings.export_dir))


if __name__ == "__main__":
  sys.exit(main())
