"""Repository implementations."""

from .notebook import SQLModelNotebookRepository

__all__ = ["SQLModelNotebookRepository"]
