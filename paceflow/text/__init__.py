"""Text transforms applied to generated documents."""

from .metadata import AUTHOR_NAME, inject
from .normalizer import PREVIEW_LENGTH, normalize, preview

__all__ = ["AUTHOR_NAME", "PREVIEW_LENGTH", "inject", "normalize", "preview"]
