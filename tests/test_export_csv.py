"""Tests for CSV encoding and the export file helpers."""

from __future__ import annotations

import csv
from pathlib import Path

import pytest
from trackit.models import TransactionType
from trackit.services import export_csv

HEADER = "Date,Item,Category,Type,Amount,Payment Mode,Description,Comments"


def test_empty_list_is_header_only():
    assert export_csv.encode_csv([]) == HEADER


def test_row_quoting_and_escaping(transaction_factory):
    txn = transaction_factory(
        date="2024-01-01",
        item="Coffee, Bike",
        amount=4.5,
        category="Food & Drink",
        payment_mode="Cash",
        description='The "good" beans',
        comments="",
    )

    text = export_csv.encode_csv([txn])

    lines = text.split("\n")
    assert lines[0] == HEADER
    assert lines[1] == (
        '"2024-01-01","Coffee, Bike","Food & Drink","Expenditure","4.5","Cash",'
        '"The ""good"" beans",""'
    )
    assert not text.endswith("\n")


def test_numbers_use_natural_decimal_form(transaction_factory):
    rows = export_csv.encode_csv(
        [transaction_factory(amount=12.0), transaction_factory(amount=0.1 + 0.2)],
        columns=["Amount"],
    ).split("\n")
    assert rows == ["Amount", '"12"', '"0.30000000000000004"']


@pytest.mark.parametrize(
    "value, expected",
    [(1e-07, "0.0000001"), (2.5e-05, "0.000025"), (4.5, "4.5"), (1e21, "1000000000000000000000"), (7, "7")],
)
def test_format_number_never_uses_exponents(value, expected):
    assert export_csv.format_number(value) == expected


def test_missing_category_is_empty_field(transaction_factory):
    text = export_csv.encode_csv([transaction_factory(category=None)], columns=["Item", "Category"])
    assert text.split("\n")[1] == '"Test item",""'


def test_legacy_columns_drop_category(transaction_factory):
    text = export_csv.encode_csv([transaction_factory()], columns=export_csv.LEGACY_COLUMNS)
    assert text.split("\n")[0] == "Date,Item,Type,Amount,Payment Mode,Description,Comments"


def test_unknown_column_is_rejected(transaction_factory):
    with pytest.raises(KeyError):
        export_csv.encode_csv([transaction_factory()], columns=["Date", "Colour"])


def test_rows_follow_input_order(transaction_factory):
    txns = [transaction_factory(item=name) for name in ("b", "a", "c")]
    rows = export_csv.encode_csv(txns, columns=["Item"]).split("\n")[1:]
    assert rows == ['"b"', '"a"', '"c"']


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Trips", "Trips_transactions.csv"),
        ("Personal Expenses 2024", "Personal_Expenses_2024_transactions.csv"),
        ("Home \t  Budget", "Home_Budget_transactions.csv"),
    ],
)
def test_export_filename(name, expected):
    assert export_csv.export_filename(name) == expected


def test_export_transactions_csv_writes_readable_file(tmp_path: Path, transaction_factory):
    txns = [
        transaction_factory(item="Groceries", amount=50.25),
        transaction_factory(item='Salary "March"', amount=125, txn_type=TransactionType.EARNING),
    ]
    output_path = tmp_path / "nested" / "ledger.csv"

    written = export_csv.export_transactions_csv(transactions=txns, output_path=output_path)

    assert written == output_path
    with output_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert [row["Item"] for row in rows] == ["Groceries", 'Salary "March"']
    assert rows[1]["Type"] == "Earning"
    assert rows[0]["Amount"] == "50.25"
