"""Streaming job controller and its feed transport."""

from .controller import StreamController
from .feed import FeedConnection, FeedFactory, HttpFeed
from .frames import TERMINAL_PREFIX, ProgressFrame, TerminalFrame, decode_frame
from .session import EXPECTED_PROGRESS_STEPS, JobSession, SessionSnapshot, SessionState

__all__ = ["EXPECTED_PROGRESS_STEPS", "TERMINAL_PREFIX", "FeedConnection", "FeedFactory", "HttpFeed", "JobSession", "ProgressFrame", "SessionSnapshot", "SessionState", "StreamController", "TerminalFrame", "decode_frame"]
