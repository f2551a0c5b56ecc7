from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from paceflow import __version__
from paceflow.api.routes import documents, sessions
from paceflow.config import get_settings
from paceflow.core.errors import PaceflowError
from paceflow.core.exceptions import global_exception_handler, http_exception_handler, paceflow_exception_handler, request_validation_exception_handler
from paceflow.core.lifespan import lifespan
from paceflow.core.middleware import RequestLoggingMiddleware


def create_app() -> FastAPI:
  """Build the HTTP surface around the streaming controller and document services."""
  settings = get_settings()
  app = FastAPI(title="PaceFlow Studio", version=__version__, lifespan=lifespan, docs_url="/docs" if settings.debug else None, redoc_url=None)

  app.add_middleware(CORSMiddleware, allow_origins=list(settings.allowed_origins), allow_credentials=False, allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["content-type"], expose_headers=["content-disposition", "x-request-id"])

  app.add_exception_handler(Exception, global_exception_handler)
  app.add_exception_handler(HTTPException, http_exception_handler)
  app.add_exception_handler(PaceflowError, paceflow_exception_handler)
  app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

  app.add_middleware(RequestLoggingMiddleware)

  @app.get("/health", include_in_schema=False)
  async def health_check() -> dict[str, str]:
    """Return a simple health status."""
    return {"status": "ok", "version": __version__}

  app.include_router(sessions.router, prefix="/v1/session", tags=["session"])
  app.include_router(documents.router, prefix="/v1/documents", tags=["documents"])
  return app


app = create_app()
