"""Spending chart rendering for notebooks."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..models.notebook import Transaction  # noqa: E402
from .views import aggregate  # noqa: E402


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def build_spending_chart(
    *,
    transactions: Iterable[Transaction],
    currency: str = "",
    title: str = "Spending by Category",
) -> Figure:
    """Horizontal bar chart of expenditure per category, largest first.

    Bars are annotated with the amount and its share of total expenditure.
    """

    summary = aggregate(transactions)
    breakdown = summary.category_breakdown

    fig, ax = plt.subplots(figsize=(9, max(3.0, 0.55 * len(breakdown) + 1.5)))

    if breakdown:
        labels = [name for name, _ in breakdown]
        sizes = [amount for _, amount in breakdown]
        cmap = plt.get_cmap("tab20c")
        colors = [cmap(i / max(len(sizes), 1)) for i in range(len(sizes))]

        # Largest category at the top
        bars = ax.barh(labels[::-1], sizes[::-1], color=colors[::-1], edgecolor="white")
        for bar, amount in zip(bars, sizes[::-1]):
            share = summary.category_share(amount)
            ax.text(
                bar.get_width(),
                bar.get_y() + bar.get_height() / 2,
                f" {currency}{amount:,.2f} ({share:.1f}%)",
                va="center",
                fontsize=9,
                color="#374151",
            )

        ax.set_xlabel(f"Amount ({currency})" if currency else "Amount")
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.margins(x=0.25)
        ax.set_title(
            f"{title}\nTotal: {currency}{summary.total_expenditure:,.2f}",
            fontsize=14,
            fontweight="bold",
        )
    else:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def export_spending_png(
    *,
    transactions: Iterable[Transaction],
    output_path: Path,
    currency: str = "",
    title: str = "Spending by Category",
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render spending chart to PNG and return the path."""

    fig = build_spending_chart(transactions=transactions, currency=currency, title=title)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if renderer is not None:
            renderer.render(fig, output_path=output_path)
        else:
            fig.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return output_path


__all__ = ["ReportRenderer", "build_spending_chart", "export_spending_png"]
