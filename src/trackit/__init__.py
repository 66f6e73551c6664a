"""Track.it personal finance notebooks."""

from __future__ import annotations

from .config import BaseConfig
from .context import create_app_context

__version__ = "1.0.0"

__all__ = ["BaseConfig", "create_app_context", "__version__"]
