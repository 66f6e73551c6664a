"""Pytest configuration and shared fixtures for Track.it tests.

This module provides config isolation, database fixtures, value factories and
helper utilities so tests never touch a real data directory.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine
from trackit.config import BaseConfig
from trackit.infra.database import create_session_factory
from trackit.models import Notebook, Transaction, TransactionType

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every test at its own data directory and a quiet console."""

    data_dir = tmp_path / "instance"
    monkeypatch.setenv("TRACKIT_DATA_DIR", str(data_dir))
    monkeypatch.setenv("TRACKIT_DEV_MODE", "false")
    for name in ("TRACKIT_DATABASE_URL", "TRACKIT_EXPORT_DIR", "TRACKIT_DEFAULT_CURRENCY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return data_dir


@pytest.fixture
def config(isolated_env: Path) -> BaseConfig:
    return BaseConfig()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    # Importing trackit.models registers the tables on the metadata
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def transaction_factory():
    """Factory for building Transaction values.

    Returns:
        Callable: Function that creates Transaction instances with sequential ids
    """
    counter = {"n": 0}

    def _create_transaction(
        amount: float = 10.0,
        item: str = "Test item",
        date: str = "2024-01-01",
        txn_type: TransactionType = TransactionType.EXPENDITURE,
        category: str | None = "Others",
        payment_mode: str = "",
        description: str = "",
        comments: str = "",
        txn_id: str | None = None,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=txn_id or f"txn-{counter['n']}",
            date=date,
            item=item,
            type=txn_type,
            amount=amount,
            category=category,
            payment_mode=payment_mode,
            description=description,
            comments=comments,
        )

    return _create_transaction


@pytest.fixture
def notebook_factory():
    """Factory for building Notebook values.

    Returns:
        Callable: Function that creates Notebook instances with sequential ids
    """
    counter = {"n": 0}

    def _create_notebook(
        name: str = "Test Notebook",
        currency: str = "$",
        created_at: int | None = None,
        transactions=(),
        notebook_id: str | None = None,
    ) -> Notebook:
        counter["n"] += 1
        stamp = created_at if created_at is not None else 1_700_000_000_000 + counter["n"]
        return Notebook(
            id=notebook_id or f"notebook-{stamp}",
            name=name,
            currency=currency,
            created_at=stamp,
            transactions=tuple(transactions),
        )

    return _create_notebook


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
