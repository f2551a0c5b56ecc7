"""PaceFlow Studio: streaming blog generation client."""

__version__ = "0.1.0"
