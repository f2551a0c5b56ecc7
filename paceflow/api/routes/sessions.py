import logging

from fastapi import APIRouter, Depends, status

from paceflow.api.deps import get_controller
from paceflow.api.models import StartSessionRequest
from paceflow.streaming.controller import StreamController
from paceflow.streaming.session import SessionSnapshot

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=SessionSnapshot, status_code=status.HTTP_202_ACCEPTED)
async def start_session(request: StartSessionRequest, controller: StreamController = Depends(get_controller)) -> SessionSnapshot:  # noqa: B008
  """Start streaming a new generation job, cancelling any running one."""
  session = await controller.start(request.topic)
  return session.snapshot()


@router.get("", response_model=SessionSnapshot)
async def get_session(controller: StreamController = Depends(get_controller)) -> SessionSnapshot:  # noqa: B008
  """Return the current session with its accumulated progress."""
  return controller.session.snapshot()


@router.post("/cancel", response_model=SessionSnapshot)
async def cancel_session(controller: StreamController = Depends(get_controller)) -> SessionSnapshot:  # noqa: B008
  """Cancel the running session, if any."""
  await controller.cancel()
  return controller.session.snapshot()
