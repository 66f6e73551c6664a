"""Repository protocols."""

from .notebook import NotebookRepository

__all__ = ["NotebookRepository"]
