"""Application context for dependency injection."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories import NotebookRepository
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelNotebookRepository
from .models.notebook import Notebook


@dataclass
class AppContext:
    """Configuration plus the repository the CLI works through."""

    config: BaseConfig
    engine: Engine
    session_factory: Callable[[], AbstractContextManager[Session]]
    notebook_repo: NotebookRepository

    def load_notebooks(self) -> list[Notebook]:
        return self.notebook_repo.load()

    def save_notebooks(self, notebooks: list[Notebook]) -> None:
        self.notebook_repo.save(notebooks)

    def selected_notebook_id(self) -> Optional[str]:
        return self.notebook_repo.get_selected_id()

    def close(self) -> None:
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, make sure the schema exists and wire the repository."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        notebook_repo=SQLModelNotebookRepository(session_factory),
    )
