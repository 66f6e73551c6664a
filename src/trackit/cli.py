"""Command line interface for Track.it."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .constants.categories import DEFAULT_CATEGORY, TRANSACTION_CATEGORIES
from .constants.currencies import CURRENCIES, currency_symbols
from .context import AppContext, create_app_context
from .logging_config import get_logger, setup_logging
from .models.notebook import Notebook, TransactionType
from .services import backup, export_csv, insights, ledger_store, reports, views

logger = get_logger(__name__)

TYPE_CHOICES = [t.value for t in TransactionType]


def _money(currency: str, amount: float) -> str:
    return f"{currency}{amount:,.2f}"


def _app(ctx: click.Context) -> AppContext:
    return ctx.find_object(AppContext)


def _resolve_notebook(app: AppContext, notebook_id: Optional[str]) -> tuple[list[Notebook], Notebook]:
    notebooks = app.load_notebooks()
    target_id = notebook_id or app.selected_notebook_id()
    if not target_id:
        raise click.UsageError("No notebook selected. Pass --notebook or run 'trackit use ID'.")
    notebook = ledger_store.find_notebook(notebooks, target_id)
    if notebook is None:
        raise click.ClickException(f"Notebook not found: {target_id}")
    return notebooks, notebook


def _save_notebook(app: AppContext, notebooks: list[Notebook], notebook: Notebook) -> None:
    app.save_notebooks(ledger_store.update_notebook(notebooks, notebook))


notebook_option = click.option(
    "--notebook", "notebook_id", default=None, help="Notebook id (defaults to the selected notebook)."
)


def query_options(func):
    """Shared --type/--search/--sort options for transaction listings."""

    func = click.option(
        "--sort",
        "sort_order",
        type=click.Choice(views.TRANSACTION_SORT_ORDERS),
        default=views.DEFAULT_SORT_ORDER,
        show_default=True,
    )(func)
    func = click.option("--search", "search_term", default="", help="Case-insensitive text search.")(func)
    func = click.option(
        "--type",
        "type_filter",
        type=click.Choice(views.TYPE_FILTERS),
        default="all",
        show_default=True,
    )(func)
    return func


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the database, logs and exports.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[Path]) -> None:
    """Track.it: personal finance notebooks."""

    config = BaseConfig(data_dir=data_dir)
    setup_logging(config)
    app = create_app_context(config)
    ctx.obj = app
    ctx.call_on_close(app.close)


# ---------------------------------------------------------------------------
# Notebooks
# ---------------------------------------------------------------------------


@cli.command("currencies")
def list_currencies() -> None:
    """Show the currencies a notebook can use."""

    for symbol, name in CURRENCIES:
        click.echo(f"{symbol}\t{name}")


@cli.command("create")
@click.argument("name")
@click.option("--currency", type=click.Choice(currency_symbols()), default=None)
@click.pass_context
def create(ctx: click.Context, name: str, currency: Optional[str]) -> None:
    """Create a notebook called NAME."""

    app = _app(ctx)
    if not name.strip():
        raise click.BadParameter("Notebook name cannot be empty", param_hint="NAME")
    notebooks, notebook = ledger_store.create_notebook(
        app.load_notebooks(), name, currency or app.config.DEFAULT_CURRENCY
    )
    app.save_notebooks(notebooks)
    click.echo(f"Created {notebook.name} ({notebook.currency}) id={notebook.id}")


@cli.command("list")
@click.option(
    "--sort",
    "sort_order",
    type=click.Choice(views.NOTEBOOK_SORT_ORDERS),
    default=views.DEFAULT_SORT_ORDER,
    show_default=True,
)
@click.pass_context
def list_notebooks(ctx: click.Context, sort_order: str) -> None:
    """List notebooks."""

    app = _app(ctx)
    notebooks = app.load_notebooks()
    if not notebooks:
        click.echo("You have no notebooks yet. Create one with 'trackit create NAME'.")
        return
    selected = app.selected_notebook_id()
    for nb in views.sort_notebooks(notebooks, sort_order):
        marker = "*" if nb.id == selected else " "
        click.echo(f"{marker} {nb.id}  {nb.name}  {len(nb.transactions)} entries • {nb.currency}")


@cli.command("use")
@click.argument("notebook_id")
@click.pass_context
def use(ctx: click.Context, notebook_id: str) -> None:
    """Select the notebook other commands act on."""

    app = _app(ctx)
    notebook = ledger_store.find_notebook(app.load_notebooks(), notebook_id)
    if notebook is None:
        raise click.ClickException(f"Notebook not found: {notebook_id}")
    app.notebook_repo.set_selected_id(notebook.id)
    click.echo(f"Now viewing {notebook.name}")


@cli.command("delete")
@click.argument("notebook_id")
@click.confirmation_option(prompt="Delete this notebook permanently? This cannot be undone.")
@click.pass_context
def delete(ctx: click.Context, notebook_id: str) -> None:
    """Delete a notebook and all of its transactions."""

    app = _app(ctx)
    app.save_notebooks(ledger_store.delete_notebook(app.load_notebooks(), notebook_id))
    if app.selected_notebook_id() == notebook_id:
        app.notebook_repo.set_selected_id(None)
    click.echo(f"Deleted {notebook_id}")


@cli.command("show")
@click.argument("notebook_id", required=False)
@click.pass_context
def show(ctx: click.Context, notebook_id: Optional[str]) -> None:
    """Show totals and the spending breakdown of a notebook."""

    _, notebook = _resolve_notebook(_app(ctx), notebook_id)
    summary = views.aggregate(notebook.transactions)
    cur = notebook.currency
    click.echo(notebook.name)
    click.echo(f"  Earnings:    {_money(cur, summary.total_earnings)}")
    click.echo(f"  Expenditure: {_money(cur, summary.total_expenditure)}")
    click.echo(f"  Balance:     {_money(cur, summary.balance)}")
    if summary.category_breakdown:
        click.echo("Spending by category:")
        for category, amount in summary.category_breakdown:
            click.echo(f"  {category:<20} {_money(cur, amount):>14}  {summary.category_share(amount):5.1f}%")


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@cli.group("txn")
def txn() -> None:
    """Add, edit, delete and list transactions."""


@txn.command("add")
@notebook_option
@click.option("--item", required=True)
@click.option("--amount", required=True, help="Amount; unparsable input is stored as 0.")
@click.option("--type", "txn_type", type=click.Choice(TYPE_CHOICES), default=TransactionType.EXPENDITURE.value)
@click.option("--category", type=click.Choice(TRANSACTION_CATEGORIES), default=DEFAULT_CATEGORY)
@click.option("--date", "txn_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--payment-mode", default="")
@click.option("--description", default="")
@click.option("--comments", default="")
@click.pass_context
def txn_add(ctx: click.Context, notebook_id: Optional[str], item: str, amount: str, txn_type: str,
            category: str, txn_date, payment_mode: str, description: str, comments: str) -> None:
    """Add a transaction."""

    if not item.strip():
        raise click.BadParameter("Item cannot be empty", param_hint="--item")
    app = _app(ctx)
    notebooks, notebook = _resolve_notebook(app, notebook_id)
    fields = {
        "item": item.strip(),
        "amount": amount,
        "type": txn_type,
        "category": category,
        "payment_mode": payment_mode,
        "description": description,
        "comments": comments,
    }
    if txn_date is not None:
        fields["date"] = txn_date.date()
    updated = ledger_store.add_transaction(notebook, fields)
    _save_notebook(app, notebooks, updated)
    added = updated.transactions[-1]
    click.echo(f"Added {added.item} {_money(notebook.currency, added.amount)} id={added.id}")


@txn.command("edit")
@click.argument("transaction_id")
@notebook_option
@click.option("--item", default=None)
@click.option("--amount", default=None)
@click.option("--type", "txn_type", type=click.Choice(TYPE_CHOICES), default=None)
@click.option("--category", type=click.Choice(TRANSACTION_CATEGORIES), default=None)
@click.option("--date", "txn_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--payment-mode", default=None)
@click.option("--description", default=None)
@click.option("--comments", default=None)
@click.pass_context
def txn_edit(ctx: click.Context, transaction_id: str, notebook_id: Optional[str], item, amount, txn_type,
             category, txn_date, payment_mode, description, comments) -> None:
    """Change fields of a transaction; options left out keep their value."""

    if item is not None and not item.strip():
        raise click.BadParameter("Item cannot be empty", param_hint="--item")
    app = _app(ctx)
    notebooks, notebook = _resolve_notebook(app, notebook_id)
    if notebook.find_transaction(transaction_id) is None:
        raise click.ClickException(f"Transaction not found: {transaction_id}")

    candidates = {
        "item": item.strip() if item is not None else None,
        "amount": amount,
        "type": txn_type,
        "category": category,
        "date": txn_date.date() if txn_date is not None else None,
        "payment_mode": payment_mode,
        "description": description,
        "comments": comments,
    }
    fields = {key: value for key, value in candidates.items() if value is not None}
    _save_notebook(app, notebooks, ledger_store.edit_transaction(notebook, transaction_id, fields))
    click.echo(f"Updated {transaction_id}")


@txn.command("delete")
@click.argument("transaction_id")
@notebook_option
@click.confirmation_option(prompt="Are you sure you want to delete this transaction?")
@click.pass_context
def txn_delete(ctx: click.Context, transaction_id: str, notebook_id: Optional[str]) -> None:
    """Delete a transaction."""

    app = _app(ctx)
    notebooks, notebook = _resolve_notebook(app, notebook_id)
    _save_notebook(app, notebooks, ledger_store.delete_transaction(notebook, transaction_id))
    click.echo(f"Deleted {transaction_id}")


@txn.command("list")
@notebook_option
@query_options
@click.pass_context
def txn_list(ctx: click.Context, notebook_id: Optional[str], type_filter: str, search_term: str,
             sort_order: str) -> None:
    """List transactions, filtered and sorted."""

    _, notebook = _resolve_notebook(_app(ctx), notebook_id)
    rows = views.filter_and_sort(notebook.transactions, type_filter, search_term, sort_order)
    if not rows:
        click.echo("No transactions found.")
        return
    for t in rows:
        sign = "-" if t.type is TransactionType.EXPENDITURE else "+"
        click.echo(
            f"{t.date}  {t.item:<24} {t.category or '':<18} "
            f"{sign}{_money(notebook.currency, t.amount):>14}  {t.payment_mode}  [{t.id}]"
        )


# ---------------------------------------------------------------------------
# Export, backup, insights
# ---------------------------------------------------------------------------


@cli.command("export-csv")
@notebook_option
@query_options
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=None,
              help="File or directory to write; defaults to the export directory.")
@click.option("--without-category", is_flag=True, default=False, help="Omit the Category column.")
@click.pass_context
def export_csv_command(ctx: click.Context, notebook_id: Optional[str], type_filter: str, search_term: str,
                       sort_order: str, out_path: Optional[Path], without_category: bool) -> None:
    """Export the current (filtered) view of a notebook to CSV."""

    app = _app(ctx)
    _, notebook = _resolve_notebook(app, notebook_id)
    rows = views.filter_and_sort(notebook.transactions, type_filter, search_term, sort_order)
    if not rows:
        raise click.ClickException("Nothing to export.")

    filename = export_csv.export_filename(notebook.name)
    if out_path is None:
        target = app.config.EXPORT_DIR / filename
    elif out_path.is_dir():
        target = out_path / filename
    else:
        target = out_path
    columns = export_csv.LEGACY_COLUMNS if without_category else export_csv.DEFAULT_COLUMNS
    written = export_csv.export_transactions_csv(transactions=rows, output_path=target, columns=columns)
    click.echo(f"Export written: {written}")


@cli.command("chart")
@notebook_option
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def chart(ctx: click.Context, notebook_id: Optional[str], out_path: Optional[Path]) -> None:
    """Render the spending-by-category chart as PNG."""

    app = _app(ctx)
    _, notebook = _resolve_notebook(app, notebook_id)
    stem = export_csv.export_filename(notebook.name).replace("_transactions.csv", "")
    target = out_path or app.config.EXPORT_DIR / f"{stem}_spending.png"
    written = reports.export_spending_png(
        transactions=notebook.transactions,
        output_path=target,
        currency=notebook.currency,
        title=notebook.name,
    )
    click.echo(f"Chart written: {written}")


@cli.command("backup")
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=None)
@click.pass_context
def backup_command(ctx: click.Context, out_path: Optional[Path]) -> None:
    """Write every notebook to a JSON backup file."""

    app = _app(ctx)
    filename = backup.backup_filename()
    if out_path is None:
        target = app.config.DATA_DIR / "backups" / filename
    elif out_path.is_dir():
        target = out_path / filename
    else:
        target = out_path
    notebooks = app.load_notebooks()
    backup.write_backup(notebooks, target)
    click.echo(f"Backed up {len(notebooks)} notebook(s) to {target}")


@cli.command("restore")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt="Import notebooks from this backup? Notebooks already present are skipped.")
@click.pass_context
def restore(ctx: click.Context, backup_file: Path) -> None:
    """Import notebooks from a JSON backup file."""

    app = _app(ctx)
    existing = app.load_notebooks()
    try:
        merged = backup.restore_backup(existing, backup_file)
    except backup.BackupFormatError as exc:
        raise click.ClickException(str(exc)) from exc
    app.save_notebooks(merged)
    click.echo(f"Imported {len(merged) - len(existing)} notebook(s).")


@cli.command("insights")
@notebook_option
@click.pass_context
def insights_command(ctx: click.Context, notebook_id: Optional[str]) -> None:
    """Ask the AI service for a short spending summary."""

    app = _app(ctx)
    _, notebook = _resolve_notebook(app, notebook_id)
    if not notebook.transactions:
        raise click.ClickException("Add some transactions first.")
    try:
        text = insights.summarize_spending(
            notebook.transactions,
            notebook.currency,
            api_key=app.config.OPENAI_API_KEY,
            model=app.config.OPENAI_MODEL,
        )
    except insights.InsightError as exc:
        logger.error("AI insight failed", extra={"notebook_id": notebook.id, "error": str(exc)})
        raise click.ClickException(
            f"Could not fetch insights at this time. Please try again later. ({exc})"
        ) from exc
    click.echo(text)


def main() -> None:
    cli(prog_name="trackit")


__all__ = ["cli", "main"]
