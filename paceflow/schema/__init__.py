"""Schema package exports."""

from .documents import Document, SeoMeta

__all__ = ["Document", "SeoMeta"]
