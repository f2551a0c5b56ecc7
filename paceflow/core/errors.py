"""Error taxonomy shared by the controller, services and HTTP surface."""

from __future__ import annotations


class PaceflowError(Exception):
  """Base class for errors raised by PaceFlow components."""


class ValidationError(PaceflowError):
  """Raised when user input is rejected before any network action."""


class TransportError(PaceflowError):
  """Raised when the generation feed fails at the connection level."""


class PayloadError(PaceflowError):
  """Raised when a terminal feed message cannot be decoded into a document."""


class CollaboratorError(PaceflowError):
  """Raised when a listing, summarization or export call fails."""

  def __init__(self, message: str, *, status_code: int | None = None) -> None:
    super().__init__(message)
    self.status_code = status_code
