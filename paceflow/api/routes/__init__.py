from . import documents, sessions

__all__ = ["documents", "sessions"]
