import logging
import re
import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("paceflow.core.middleware")

REQUEST_ID_HEADER = "x-request-id"
_QUIET_PATHS = frozenset({"/health"})
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def _resolve_request_id(scope: Scope) -> str:
  """Reuse a well-formed caller request id so logs correlate across services."""
  incoming = Headers(scope=scope).get(REQUEST_ID_HEADER)
  if incoming and _SAFE_REQUEST_ID.match(incoming):
    return incoming
  return uuid.uuid4().hex


class RequestLoggingMiddleware:
  """Tag each HTTP request with an id and log its outcome; bodies are never logged."""

  def __init__(self, app: ASGIApp) -> None:
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    request_id = _resolve_request_id(scope)
    # Exception handlers read it back through request.state.
    scope.setdefault("state", {})["request_id"] = request_id
    path = scope.get("path", "")
    level = logging.DEBUG if path in _QUIET_PATHS else logging.INFO
    started = time.perf_counter()
    status_code = 0

    async def send_with_request_id(message: Message) -> None:
      nonlocal status_code
      if message["type"] == "http.response.start":
        status_code = message["status"]
        MutableHeaders(scope=message).setdefault(REQUEST_ID_HEADER, request_id)
      await send(message)

    try:
      await self.app(scope, receive, send_with_request_id)
    finally:
      elapsed_ms = (time.perf_counter() - started) * 1000
      logger.log(level, "%s %s -> %s in %.1fms request_id=%s", scope.get("method", "-"), path, status_code or "error", elapsed_ms, request_id)
