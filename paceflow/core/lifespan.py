import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from paceflow.config import get_settings
from paceflow.core.logging import initialize_logging
from paceflow.services.client import GenerationServiceClient
from paceflow.services.documents import DocumentStore
from paceflow.services.export import DocumentExporter
from paceflow.services.summaries import SummaryRequester
from paceflow.streaming.controller import StreamController


def attach_components(app: FastAPI, client: GenerationServiceClient, *, controller: StreamController | None = None, exporter: DocumentExporter | None = None) -> None:
  """Build the controller and services around one collaborator client and store them on app.state.

  A supplied `controller` is wired to the document store like a built one.
  """
  controller = controller or StreamController(client.open_feed)
  store = DocumentStore(client)
  controller.subscribe(store.on_session_change)
  app.state.client = client
  app.state.controller = controller
  app.state.document_store = store
  app.state.summary_requester = SummaryRequester(client)
  app.state.exporter = exporter or DocumentExporter()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Initialize logging and collaborators; release the feed before the HTTP client on shutdown."""
  settings = get_settings()
  initialize_logging(settings)
  logger = logging.getLogger("paceflow.core.lifespan")

  client = GenerationServiceClient.from_settings(settings)
  attach_components(app, client)
  logger.info("Startup complete; generation service at %s", settings.api_base_url)

  try:
    yield
  finally:
    await app.state.controller.aclose()
    await client.aclose()
    logger.info("Shutdown complete.")
