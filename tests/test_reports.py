"""Tests for the spending chart export."""

from __future__ import annotations

from pathlib import Path

from matplotlib.figure import Figure
from trackit.models import TransactionType
from trackit.services import reports


class _RecordingRenderer:
    def __init__(self) -> None:
        self.calls: list[Path] = []

    def render(self, figure: Figure, *, output_path: Path) -> None:
        self.calls.append(output_path)
        output_path.write_bytes(b"fake")


def test_chart_has_one_bar_per_expenditure_category(transaction_factory):
    txns = [
        transaction_factory(amount=20, category="Transport"),
        transaction_factory(amount=5, category="Health"),
        transaction_factory(amount=100, category="Salary", txn_type=TransactionType.EARNING),
    ]

    fig = reports.build_spending_chart(transactions=txns, currency="$", title="Trips")

    ax = fig.axes[0]
    assert len(ax.patches) == 2
    assert "Trips" in ax.get_title()
    assert "$25.00" in ax.get_title()


def test_chart_without_expenses_shows_placeholder():
    fig = reports.build_spending_chart(transactions=[])
    texts = [t.get_text() for t in fig.axes[0].texts]
    assert "No expense data" in texts


def test_export_spending_png_writes_file(tmp_path: Path, transaction_factory):
    output = tmp_path / "charts" / "spending.png"
    written = reports.export_spending_png(
        transactions=[transaction_factory(amount=12.5)], output_path=output, currency="₹"
    )
    assert written == output
    assert output.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_export_spending_png_uses_renderer(tmp_path: Path, transaction_factory):
    renderer = _RecordingRenderer()
    output = tmp_path / "out.png"
    reports.export_spending_png(
        transactions=[transaction_factory()], output_path=output, renderer=renderer
    )
    assert renderer.calls == [output]
