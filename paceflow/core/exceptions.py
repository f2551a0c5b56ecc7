"""FastAPI exception handlers answering with ``{"detail", "requestId"}`` bodies."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paceflow.core.errors import CollaboratorError, PaceflowError, TransportError, ValidationError

logger = logging.getLogger("paceflow.core.exceptions")

GENERIC_SERVER_ERROR = "Internal Server Error"


def _json_safe(value: Any) -> Any:
  """Reduce validation error context to JSON primitives."""
  if isinstance(value, BaseException):
    return f"{type(value).__name__}: {value}" if str(value) else type(value).__name__
  if isinstance(value, Mapping):
    return {str(key): _json_safe(item) for key, item in value.items()}
  if isinstance(value, Sequence) and not isinstance(value, str | bytes):
    return [_json_safe(item) for item in value]
  if value is None or isinstance(value, str | int | float | bool):
    return value
  return str(value)


def _sanitize_validation_errors(errors: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
  """Drop submitted values (top level and ``ctx``) so topics never echo back into logs or responses."""
  sanitized: list[dict[str, Any]] = []
  for error in errors:
    entry = {key: value for key, value in error.items() if key != "input"}
    if isinstance(entry.get("ctx"), Mapping):
      entry["ctx"] = {key: value for key, value in entry["ctx"].items() if key != "input"}
    sanitized.append(_json_safe(entry))
  return sanitized


def _status_for(exc: PaceflowError) -> int:
  if isinstance(exc, ValidationError):
    return status.HTTP_422_UNPROCESSABLE_ENTITY
  if isinstance(exc, TransportError | CollaboratorError):
    return status.HTTP_502_BAD_GATEWAY
  return status.HTTP_500_INTERNAL_SERVER_ERROR


def _respond(request: Request, status_code: int, detail: Any) -> JSONResponse:
  content: dict[str, Any] = {"detail": detail}
  request_id = getattr(request.state, "request_id", None)
  if request_id:
    content["requestId"] = request_id
  return JSONResponse(status_code=status_code, content=content)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Last resort for unhandled errors; the traceback stays in the logs."""
  logger.error("Unhandled %s on %s %s request_id=%s", type(exc).__name__, request.method, request.url.path, getattr(request.state, "request_id", None), exc_info=exc)
  return _respond(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  errors = _sanitize_validation_errors(exc.errors())
  logger.warning("Rejected %s %s request_id=%s errors=%s", request.method, request.url.path, getattr(request.state, "request_id", None), errors)
  return _respond(request, status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
  # Server-side details are logged, never returned.
  if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
    logger.error("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
    return _respond(request, exc.status_code, GENERIC_SERVER_ERROR)
  return _respond(request, exc.status_code, exc.detail)


async def paceflow_exception_handler(request: Request, exc: PaceflowError) -> JSONResponse:
  """Map the error taxonomy onto HTTP statuses: 422 for input, 502 for collaborators, 500 otherwise."""
  status_code = _status_for(exc)
  if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
    logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
  else:
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
  return _respond(request, status_code, str(exc))
