"""Notebook repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ...models.notebook import Notebook


class NotebookRepository(Protocol):
    """Loads and saves the whole notebook collection as one snapshot."""

    def load(self) -> list[Notebook]:
        """Return the stored collection, applying backward-compatibility defaults."""
        ...

    def save(self, notebooks: Sequence[Notebook]) -> None:
        """Replace the stored collection."""
        ...

    def get_selected_id(self) -> Optional[str]:
        """Return the id of the notebook currently being viewed, if any."""
        ...

    def set_selected_id(self, notebook_id: Optional[str]) -> None:
        """Store or clear the currently viewed notebook id."""
        ...
