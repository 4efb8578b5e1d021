"""Document construction interface used by the grammar engine."""

from .factory import DocumentFactory

__all__ = ["DocumentFactory"]
