"""CSV export of a user's months."""

import csv
import io

from .months import MonthEntry

HEADER = [
    "Month",
    "Internet", "Building Fee", "Water", "Gas", "Electricity",
    "Credit Card", "Car", "Garage",
    "Cadastre Income", "Admin Income",
    "Housing Total", "Other Total", "Income Total", "Expenses Total", "Balance",
]

EXPORT_FILENAME = "gastos.csv"


def _number(value):
    # 150.0 -> 150
    return int(value) if float(value).is_integer() else value


def export_rows(months):
    """Header plus one row per month, oldest month first."""
    rows = [list(HEADER)]
    for month in sorted(months):
        entry = months[month]
        if not isinstance(entry, MonthEntry):
            entry = MonthEntry.from_dict(entry)
        totals = entry.totals()
        amounts = [
            entry.internet, entry.building_fee, entry.water, entry.gas, entry.electricity,
            entry.credit_card, entry.car, entry.garage,
            entry.income_cadastre, entry.income_admin,
            totals.housing, totals.other, totals.income, totals.expenses, totals.balance,
        ]
        rows.append([month] + [_number(amount) for amount in amounts])
    return rows


def export_csv(months):
    """Render months as CSV: text cells quoted, numbers bare, rows joined by newlines."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(export_rows(months))
    return buffer.getvalue().rstrip("\n")
